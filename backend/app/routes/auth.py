from fastapi import APIRouter, Depends, Request
import os
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..auth import Principal, create_access_token, get_current_user
from ..services import accounts
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
testing = os.getenv("TESTING") == "1"

def rate_limit(limit: str):
    if testing:
        def wrapper(func):
            return func
        return wrapper
    return limiter.limit(limit)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(account) -> schemas.AuthResponse:
    token = create_access_token(account)
    return schemas.AuthResponse(
        access_token=token,
        token=token,
        user=schemas.AccountOut.model_validate(account),
    )


@router.post("/signup", response_model=schemas.AuthResponse, status_code=201)
@rate_limit("5/minute")
def signup(request: Request, data: schemas.SignupRequest, db: Session = Depends(get_db)):
    account = accounts.signup(db, data.email, data.password, data.role)
    return _auth_response(account)


@router.post("/login", response_model=schemas.AuthResponse)
@router.post("/signin", response_model=schemas.AuthResponse)
@rate_limit("10/minute")
def login(request: Request, data: schemas.LoginRequest, db: Session = Depends(get_db)):
    account = accounts.authenticate(db, data.email, data.password)
    return _auth_response(account)


@router.get("/me", response_model=schemas.AccountOut)
def read_current_account(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return accounts.get_account(db, principal.id)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import models
from .config import get_settings
from .errors import Unauthorized
from .schemas.accounts import normalize_email

# purpose: password hashing plus issuing and verifying bearer tokens
# status: active

# Fixed work factor; callers cannot tune it.
BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a secret.
_BCRYPT_MAX_BYTES = 72

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Caller identity carried by a verified access token."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_secret_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(account: models.User, *, expires_minutes: int | None = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.token_expire_minutes
    payload = {
        "sub": str(account.id),
        "email": normalize_email(account.email),
        "role": account.role,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    settings = get_settings()
    try:
        data = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise Unauthorized("Invalid token") from exc
    try:
        account_id = int(data["sub"])
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Invalid token") from exc
    role = data.get("role")
    email = data.get("email")
    if role not in models.ROLES or not isinstance(email, str):
        raise Unauthorized("Invalid token")
    return Principal(id=account_id, email=email, role=role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    return decode_access_token(credentials.credentials)

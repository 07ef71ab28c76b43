from sqlalchemy.orm import Session
from fastapi import APIRouter, Depends
from ..database import get_db
from ..auth import Principal, get_current_user
from ..rbac import check_role
from .. import schemas, audit

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.get("/", response_model=list[schemas.AuditLogOut])
def list_logs(
    user_id: int | None = None,
    target_type: str | None = None,
    target_id: int | None = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    if user_id is not None and user_id != principal.id:
        check_role(principal, "admin")
    elif user_id is None and not principal.is_admin:
        user_id = principal.id
    return audit.list_logs(db, user_id=user_id, target_type=target_type, target_id=target_id)

from datetime import datetime, timezone
from sqlalchemy.orm import Session
from . import models


def log_action(
    db: Session,
    user_id: int | None,
    action: str,
    target_type: str | None = None,
    target_id: int | None = None,
    details: dict | None = None,
):
    """Stage an audit row in the caller's transaction; the caller commits."""
    log = models.AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details or {},
        created_at=datetime.now(timezone.utc),
    )
    db.add(log)
    return log


def list_logs(
    db: Session,
    *,
    user_id: int | None = None,
    target_type: str | None = None,
    target_id: int | None = None,
):
    query = db.query(models.AuditLog)
    if user_id is not None:
        query = query.filter(models.AuditLog.user_id == user_id)
    if target_type:
        query = query.filter(models.AuditLog.target_type == target_type)
    if target_id is not None:
        query = query.filter(models.AuditLog.target_id == target_id)
    return query.order_by(models.AuditLog.created_at.desc(), models.AuditLog.id.desc()).all()

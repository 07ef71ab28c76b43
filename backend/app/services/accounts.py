"""Account signup and credential checks."""

from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import audit, models, schemas
from ..auth import get_password_hash, verify_password
from ..database import write_scope
from ..errors import Conflict, NotFound, StorageError, Unauthorized, ValidationError

LOG = logging.getLogger(__name__)

# purpose: case-insensitive unique accounts with hashed credentials
# status: active

DUPLICATE_EMAIL = "User with this email already exists"
BAD_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str | None) -> str:
    return schemas.normalize_email(email or "")


def find_by_email(db: Session, email: str) -> models.User | None:
    normalized = normalize_email(email)
    try:
        return (
            db.query(models.User)
            .filter(sa.func.lower(models.User.email) == normalized)
            .first()
        )
    except SQLAlchemyError as exc:
        LOG.exception("account lookup failed")
        raise StorageError("Failed to check user existence") from exc


def signup(db: Session, email: str, password: str, role: str = "user") -> models.User:
    """Create an account, raising ``Conflict`` for any case variant of a known email.

    The lookup and the insert are separate statements, so two concurrent
    signups can both pass the lookup. The unique index on ``lower(email)``
    rejects the second insert and ``write_scope`` turns that into ``Conflict``.
    """

    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    if role not in models.ROLES:
        raise ValidationError(f"role must be one of {', '.join(models.ROLES)}")
    if find_by_email(db, normalized) is not None:
        LOG.info("signup rejected, email already registered")
        raise Conflict(DUPLICATE_EMAIL)

    account = models.User(
        email=normalized,
        hashed_password=get_password_hash(password),
        role=role,
    )
    with write_scope(db, conflict=DUPLICATE_EMAIL):
        db.add(account)
        db.flush()
        audit.log_action(db, account.id, "signup", "user", account.id)
    db.refresh(account)
    LOG.info("account %s created role=%s", account.id, account.role)
    return account


def authenticate(db: Session, email: str, password: str) -> models.User:
    """Return the account for valid credentials.

    Unknown email and wrong password raise the same ``Unauthorized`` so the
    response does not reveal which one was wrong.
    """

    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    account = find_by_email(db, normalized)
    if account is None or not verify_password(password, account.hashed_password):
        LOG.info("login failed")
        raise Unauthorized(BAD_CREDENTIALS)
    with write_scope(db):
        audit.log_action(db, account.id, "login", "user", account.id)
    LOG.info("account %s logged in", account.id)
    return account


def get_account(db: Session, account_id: int) -> models.User:
    account = db.get(models.User, account_id)
    if account is None:
        raise NotFound("User not found")
    return account

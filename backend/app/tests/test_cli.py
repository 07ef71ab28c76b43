from sqlalchemy import text

from .conftest import TestingSessionLocal, unique_email
from app import models
from app.cli.normalize_emails import normalize_emails


def _insert_raw(db, email):
    db.execute(
        text(
            "INSERT INTO users (email, hashed_password, role, created_at, updated_at) "
            "VALUES (:email, 'x', 'user', '2024-01-01 00:00:00', '2024-01-01 00:00:00')"
        ),
        {"email": email},
    )


def test_normalize_emails_rewrites_legacy_rows():
    db = TestingSessionLocal()
    try:
        email = unique_email("legacy")
        _insert_raw(db, f"  {email} ")
        db.commit()

        preview = normalize_emails(dry_run=True, session=db)
        assert preview["dry_run"] is True
        assert preview["updated"] >= 1
        assert db.query(models.User).filter(models.User.email == email).count() == 0

        summary = normalize_emails(session=db)
        assert summary["updated"] >= 1
        assert db.query(models.User).filter(models.User.email == email).count() == 1
    finally:
        db.close()

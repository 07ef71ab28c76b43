"""CLI utilities for account maintenance."""

# purpose: bring accounts created before email normalization onto lower-cased, trimmed emails
# status: active
# depends_on: backend.app.database, backend.app.models

from __future__ import annotations

import json
import logging

import typer
from sqlalchemy.orm import Session

from .. import models
from ..database import SessionLocal
from ..services.accounts import normalize_email

LOG = logging.getLogger(__name__)

app = typer.Typer(help="Account maintenance commands")


def normalize_emails(dry_run: bool = False, session: Session | None = None) -> dict[str, int | bool]:
    """Lower-case and trim stored emails, skipping ones that would collide."""

    processed = 0
    updated = 0
    skipped = 0
    owns_session = session is None
    session = session or SessionLocal()
    try:
        accounts = session.query(models.User).order_by(models.User.id.asc()).all()
        taken = {account.email: account.id for account in accounts}
        for account in accounts:
            processed += 1
            normalized = normalize_email(account.email)
            if normalized == account.email:
                continue
            owner = taken.get(normalized)
            if owner is not None and owner != account.id:
                LOG.warning(
                    "email %s conflicts with account %s, skipping account %s",
                    normalized,
                    owner,
                    account.id,
                )
                skipped += 1
                continue
            taken.pop(account.email, None)
            taken[normalized] = account.id
            if not dry_run:
                account.email = normalized
            updated += 1
        if not dry_run and updated:
            session.commit()
        return {
            "processed": processed,
            "updated": updated,
            "skipped": skipped,
            "dry_run": dry_run,
        }
    except Exception:
        session.rollback()
        raise
    finally:
        if owns_session:
            session.close()


@app.command("normalize-emails")
def normalize_emails_command(
    dry_run: bool = typer.Option(False, help="Report changes without writing them"),
) -> None:
    """CLI wrapper for :func:`normalize_emails`."""

    summary = normalize_emails(dry_run=dry_run)
    typer.echo(json.dumps(summary))


if __name__ == "__main__":
    app()

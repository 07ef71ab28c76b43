"""Sparse updates for archived records.

A patch is a pydantic model whose ``model_fields_set`` says which fields the
client sent. Only those become column assignments: a field sent as ``""``
clears the column, a field left out is never written.
"""

from __future__ import annotations

import logging
from typing import Any

import sqlalchemy as sa
from pydantic import BaseModel
from sqlalchemy.orm import Session

from . import audit
from .database import write_scope
from .errors import NoOpError, NotFound, ValidationError

LOG = logging.getLogger(__name__)

# purpose: turn a touched/untouched patch into guarded column-level writes
# status: active

PROTECTED_COLUMNS = frozenset({"id", "created_by", "created_at", "updated_at"})


def writable_columns(model) -> dict[str, sa.Column]:
    return {
        column.key: column
        for column in sa.inspect(model).columns
        if column.key not in PROTECTED_COLUMNS
    }


def touched_fields(patch: BaseModel) -> dict[str, Any]:
    """Return the fields the client actually sent, with decoded Python values."""
    return {name: getattr(patch, name) for name in patch.model_fields_set}


def compute_assignments(model, patch: BaseModel) -> dict[str, Any]:
    columns = writable_columns(model)
    assignments: dict[str, Any] = {}
    for name, value in touched_fields(patch).items():
        column = columns.get(name)
        if column is None:
            continue
        if value is None and not column.nullable:
            raise ValidationError(f"{name} cannot be null")
        assignments[name] = value
    if not assignments:
        raise NoOpError()
    return assignments


def write_assignments(
    db: Session,
    model,
    record_id: int,
    assignments: dict[str, Any],
    *,
    actor_id: int | None,
    action: str,
    target_type: str,
):
    """Apply ``assignments`` to one row and return the row as stored.

    The UPDATE is keyed on the id, so a row deleted after the caller read it
    yields ``NotFound`` instead of a silent no-op. Nothing is written unless
    every statement succeeds.
    """

    with write_scope(db):
        result = db.execute(
            sa.update(model)
            .where(model.id == record_id)
            .values(**assignments)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound(f"{target_type.replace('_', ' ').capitalize()} not found")
        audit.log_action(
            db,
            actor_id,
            action,
            target_type,
            record_id,
            {"fields": sorted(assignments)},
        )
    fresh = db.get(model, record_id, populate_existing=True)
    if fresh is None:
        raise NotFound(f"{target_type.replace('_', ' ').capitalize()} not found")
    LOG.info("%s %s %s fields=%s", action, target_type, record_id, sorted(assignments))
    return fresh


def apply_patch(db: Session, record, patch: BaseModel, *, actor_id: int | None, target_type: str):
    """Merge ``patch`` into ``record`` and return the re-read row."""

    model = type(record)
    assignments = compute_assignments(model, patch)
    return write_assignments(
        db,
        model,
        record.id,
        assignments,
        actor_id=actor_id,
        action=f"patch_{target_type}",
        target_type=target_type,
    )

"""CRUD over archived record kinds (test items, studies, facility documents)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import get_args

import sqlalchemy as sa
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import audit, models, schemas
from ..auth import Principal
from ..database import write_scope
from ..errors import NotFound, ValidationError
from ..patching import apply_patch, write_assignments, writable_columns

LOG = logging.getLogger(__name__)

# purpose: one uniform store for every archived record kind
# status: active
# depends_on: backend.app.patching, backend.app.dates


@dataclass(frozen=True)
class RecordKind:
    name: str
    label: str
    model: type
    create_schema: type[BaseModel]
    patch_schema: type[BaseModel]
    out_schema: type[BaseModel]


TEST_ITEMS = RecordKind(
    name="test_item",
    label="Test item",
    model=models.TestItem,
    create_schema=schemas.TestItemCreate,
    patch_schema=schemas.TestItemPatch,
    out_schema=schemas.TestItemOut,
)
STUDIES = RecordKind(
    name="study",
    label="Study",
    model=models.Study,
    create_schema=schemas.StudyCreate,
    patch_schema=schemas.StudyPatch,
    out_schema=schemas.StudyOut,
)
FACILITY_DOCS = RecordKind(
    name="facility_doc",
    label="Facility document",
    model=models.FacilityDoc,
    create_schema=schemas.FacilityDocCreate,
    patch_schema=schemas.FacilityDocPatch,
    out_schema=schemas.FacilityDocOut,
)

KINDS = {kind.name: kind for kind in (TEST_ITEMS, STUDIES, FACILITY_DOCS)}
ALLOWED_ENTITIES = frozenset(get_args(schemas.Entity))


def _column_values(kind: RecordKind, payload: BaseModel) -> dict:
    """Every writable column with the payload value or the schema default."""
    columns = writable_columns(kind.model)
    return {
        name: getattr(payload, name)
        for name in type(payload).model_fields
        if name in columns
    }


def _check_entity(entity: str | None) -> None:
    if entity is not None and entity not in ALLOWED_ENTITIES:
        raise ValidationError(
            f"entity must be one of {', '.join(sorted(ALLOWED_ENTITIES))}"
        )


def create_record(db: Session, kind: RecordKind, payload: BaseModel, principal: Principal):
    values = _column_values(kind, payload)
    _check_entity(values.get("entity"))
    record = kind.model(**values, created_by=principal.id)
    with write_scope(db):
        db.add(record)
        db.flush()
        audit.log_action(db, principal.id, f"create_{kind.name}", kind.name, record.id)
    db.refresh(record)
    LOG.info("created %s %s entity=%s by=%s", kind.name, record.id, record.entity, principal.id)
    return record


def list_records(db: Session, kind: RecordKind, entity: str | None = None):
    _check_entity(entity)
    model = kind.model
    query = db.query(model)
    if entity:
        query = query.filter(model.entity == entity)
    # created_at can collide under rapid writes; id keeps the order stable
    return query.order_by(model.created_at.desc(), model.id.desc()).all()


def get_record(db: Session, kind: RecordKind, record_id: int):
    record = db.get(kind.model, record_id)
    if record is None:
        raise NotFound(f"{kind.label} not found")
    return record


def replace_record(
    db: Session,
    kind: RecordKind,
    record_id: int,
    payload: BaseModel,
    principal: Principal,
):
    """Full replacement: fields missing from ``payload`` go back to defaults."""

    get_record(db, kind, record_id)
    values = _column_values(kind, payload)
    _check_entity(values.get("entity"))
    return write_assignments(
        db,
        kind.model,
        record_id,
        values,
        actor_id=principal.id,
        action=f"update_{kind.name}",
        target_type=kind.name,
    )


def patch_record(
    db: Session,
    kind: RecordKind,
    record_id: int,
    patch: BaseModel,
    principal: Principal,
):
    record = get_record(db, kind, record_id)
    if "entity" in patch.model_fields_set:
        _check_entity(patch.entity)
    return apply_patch(db, record, patch, actor_id=principal.id, target_type=kind.name)


def delete_record(db: Session, kind: RecordKind, record_id: int, principal: Principal) -> int:
    """Delete one row; a missing id is ``NotFound`` so callers can tell "already gone" apart."""

    model = kind.model
    with write_scope(db):
        result = db.execute(
            sa.delete(model)
            .where(model.id == record_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound(f"{kind.label} not found")
        audit.log_action(db, principal.id, f"delete_{kind.name}", kind.name, record_id)
    LOG.info("deleted %s %s by=%s", kind.name, record_id, principal.id)
    return record_id

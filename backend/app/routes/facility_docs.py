from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import Principal, get_current_user
from ..rbac import require_admin, require_user
from .. import schemas
from ..services import records

router = APIRouter(prefix="/api/facility-docs", tags=["facility-docs"])
KIND = records.FACILITY_DOCS


@router.post("", response_model=schemas.FacilityDocOut, status_code=201)
def create_facility_doc(
    doc: schemas.FacilityDocCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.create_record(db, KIND, doc, principal)


@router.get("", response_model=list[schemas.FacilityDocOut])
def list_facility_docs(
    entity: schemas.Entity | None = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.list_records(db, KIND, entity)


@router.get("/{doc_id}", response_model=schemas.FacilityDocOut)
def get_facility_doc(
    doc_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.get_record(db, KIND, doc_id)


@router.put("/{doc_id}", response_model=schemas.FacilityDocOut)
def replace_facility_doc(
    doc_id: int,
    doc: schemas.FacilityDocCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.replace_record(db, KIND, doc_id, doc, principal)


@router.patch("/{doc_id}", response_model=schemas.FacilityDocOut)
def patch_facility_doc(
    doc_id: int,
    patch: schemas.FacilityDocPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.patch_record(db, KIND, doc_id, patch, principal)


@router.delete("/{doc_id}", response_model=schemas.DeleteResult)
def delete_facility_doc(
    doc_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    return schemas.DeleteResult(id=records.delete_record(db, KIND, doc_id, principal))

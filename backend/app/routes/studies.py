from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import Principal, get_current_user
from ..rbac import require_admin, require_user
from .. import schemas
from ..services import records

router = APIRouter(prefix="/api/studies", tags=["studies"])
KIND = records.STUDIES


@router.post("", response_model=schemas.StudyOut, status_code=201)
def create_study(
    study: schemas.StudyCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.create_record(db, KIND, study, principal)


@router.get("", response_model=list[schemas.StudyOut])
def list_studies(
    entity: schemas.Entity | None = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.list_records(db, KIND, entity)


@router.get("/{study_id}", response_model=schemas.StudyOut)
def get_study(
    study_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.get_record(db, KIND, study_id)


@router.put("/{study_id}", response_model=schemas.StudyOut)
def replace_study(
    study_id: int,
    study: schemas.StudyCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.replace_record(db, KIND, study_id, study, principal)


@router.patch("/{study_id}", response_model=schemas.StudyOut)
def patch_study(
    study_id: int,
    patch: schemas.StudyPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.patch_record(db, KIND, study_id, patch, principal)


@router.delete("/{study_id}", response_model=schemas.DeleteResult)
def delete_study(
    study_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    return schemas.DeleteResult(id=records.delete_record(db, KIND, study_id, principal))

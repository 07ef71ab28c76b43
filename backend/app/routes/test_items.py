from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import Principal, get_current_user
from ..rbac import require_admin, require_user
from .. import schemas
from ..services import records

router = APIRouter(prefix="/api/test-items", tags=["test-items"])
KIND = records.TEST_ITEMS


@router.post("", response_model=schemas.TestItemOut, status_code=201)
def create_test_item(
    item: schemas.TestItemCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.create_record(db, KIND, item, principal)


@router.get("", response_model=list[schemas.TestItemOut])
def list_test_items(
    entity: schemas.Entity | None = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.list_records(db, KIND, entity)


@router.get("/{item_id}", response_model=schemas.TestItemOut)
def get_test_item(
    item_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return records.get_record(db, KIND, item_id)


@router.put("/{item_id}", response_model=schemas.TestItemOut)
def replace_test_item(
    item_id: int,
    item: schemas.TestItemCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.replace_record(db, KIND, item_id, item, principal)


@router.patch("/{item_id}", response_model=schemas.TestItemOut)
def patch_test_item(
    item_id: int,
    patch: schemas.TestItemPatch,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user),
):
    return records.patch_record(db, KIND, item_id, patch, principal)


@router.delete("/{item_id}", response_model=schemas.DeleteResult)
def delete_test_item(
    item_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    return schemas.DeleteResult(id=records.delete_record(db, KIND, item_id, principal))

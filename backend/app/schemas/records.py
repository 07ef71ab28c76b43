"""Wire contracts for archived records.

Each kind has a ``Create`` model (also used for full replacement), a
``Patch`` model where every field may be omitted, and an ``Out`` model.
Patch models keep the Create field types so a touched field is validated
exactly like it would be on create; whether a field was touched at all is
read from ``model_fields_set``.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from ..dates import WireDate
from .accounts import CreatorOut

# purpose: request/response schemas for test items, studies and facility documents
# status: active

Entity = Literal["adgyl", "agro", "biopharma"]


def _none_to_empty(value: object) -> object:
    return "" if value is None else value


Text = Annotated[str, BeforeValidator(_none_to_empty)]


class RecordMeta(BaseModel):
    id: int
    created_by: Optional[int] = None
    creator: Optional[CreatorOut] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TestItemCreate(BaseModel):
    __test__ = False

    entity: Entity
    test_item_name: Text = Field(min_length=1)
    test_item_code: Text = ""
    company_name: Text = ""
    date_of_receipt: WireDate = None
    batch_no: Text = ""
    arc_no: Text = ""
    rack_no: Text = ""
    index_no: Text = ""
    storage: Text = ""
    expiry_date: WireDate = None
    retest_date: WireDate = None
    quantity: Text = ""
    date_of_archive: WireDate = None
    archived_by: Text = ""
    disposed_or_returned: Text = ""
    sponsor_approval_date: WireDate = None
    remark: Text = ""


class TestItemPatch(TestItemCreate):
    entity: Entity = None
    test_item_name: Text = Field(None, min_length=1)


class TestItemOut(RecordMeta, TestItemCreate):
    pass


class StudyCreate(BaseModel):
    entity: Entity
    study_number: Text = ""
    study_code: Text = ""
    test_item_code: Text = ""
    sd_or_pi_name: Text = ""
    study_plan_page_no: Text = ""
    study_plan_amendment_pages: Text = ""
    date_of_receipt: WireDate = None
    rd_index: Text = ""
    fr_index: Text = ""
    block_slides_index: Text = ""
    tissues_index: Text = ""
    carcass_index: Text = ""
    raw_data_count: int = Field(0, ge=0)
    final_or_terminated_report: Text = ""
    amendment_to_final_report: Text = ""
    others: Text = ""
    electronic_data_archived_using_archive_system: bool = False
    manually_archiving_data: bool = False
    provantis_data: bool = False
    empower_data: bool = False
    other_electronic_if_any: bool = False
    details_of_electronic_data_archived_through: Text = ""
    block_slides_name_box_no: Text = ""
    block_slides_no_of_box: Text = ""
    tissue_box_name_box_no: Text = ""
    tissue_box_no_of_box: Text = ""
    carcass_box_name_box_no: Text = ""
    carcass_box_no_of_box: Text = ""
    study_completion_date: WireDate = None
    remarks: Text = ""
    raw_data_items: Optional[Any] = None


class StudyPatch(StudyCreate):
    entity: Entity = None


class StudyOut(RecordMeta, StudyCreate):
    pass


class FacilityDocCreate(BaseModel):
    entity: Entity
    dept_section: Text = ""
    date: WireDate = None
    particulars: Text = ""
    total_no_of_pages: Optional[int] = Field(None, ge=0)
    submitted_by: Text = ""
    admin_index_no: Text = ""
    admin_date_of_receipt: WireDate = None
    admin_date_of_indexing: WireDate = None
    admin_remarks: Text = ""


class FacilityDocPatch(FacilityDocCreate):
    entity: Entity = None


class FacilityDocOut(RecordMeta, FacilityDocCreate):
    pass


class DeleteResult(BaseModel):
    message: str = "deleted"
    id: int

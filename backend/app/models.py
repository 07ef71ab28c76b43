import sqlalchemy as sa
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Integer,
    JSON,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .database import Base
from .dates import ScalarDate

ENTITIES = ("adgyl", "agro", "biopharma")
ROLES = ("user", "admin")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _entity_check(table: str) -> sa.CheckConstraint:
    allowed = ", ".join(f"'{e}'" for e in ENTITIES)
    return sa.CheckConstraint(f"entity IN ({allowed})", name=f"ck_{table}_entity")


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        sa.Index("uq_users_email_lower", sa.func.lower(email), unique=True),
        {"sqlite_autoincrement": True},
    )


class ArchivedRecordMixin:
    """Columns shared by every archived record kind.

    ``created_by`` deliberately has no database foreign key: accounts can be
    removed while their records stay, and the link then resolves to no
    creator.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity = Column(String(20), nullable=False, index=True)
    created_by = Column(Integer, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


def _creator(model_name: str):
    return relationship(
        "User",
        primaryjoin=f"foreign({model_name}.created_by) == User.id",
        viewonly=True,
        lazy="joined",
    )


class TestItem(ArchivedRecordMixin, Base):
    __tablename__ = "test_items"
    __test__ = False
    test_item_name = Column(String, nullable=False)
    test_item_code = Column(String, default="")
    company_name = Column(String, default="")
    date_of_receipt = Column(ScalarDate)
    batch_no = Column(String, default="")
    arc_no = Column(String, default="")
    rack_no = Column(String, default="")
    index_no = Column(String, default="")
    storage = Column(String, default="")
    expiry_date = Column(ScalarDate)
    retest_date = Column(ScalarDate)
    quantity = Column(String, default="")
    date_of_archive = Column(ScalarDate)
    archived_by = Column(String, default="")
    disposed_or_returned = Column(String, default="")
    sponsor_approval_date = Column(ScalarDate)
    remark = Column(Text, default="")

    creator = _creator("TestItem")

    __table_args__ = (_entity_check("test_items"), {"sqlite_autoincrement": True})


class Study(ArchivedRecordMixin, Base):
    __tablename__ = "studies"
    study_number = Column(String, default="")
    study_code = Column(String, default="")
    test_item_code = Column(String, default="")
    sd_or_pi_name = Column(String, default="")
    study_plan_page_no = Column(String, default="")
    study_plan_amendment_pages = Column(String, default="")
    date_of_receipt = Column(ScalarDate)
    rd_index = Column(String, default="")
    fr_index = Column(String, default="")
    block_slides_index = Column(String, default="")
    tissues_index = Column(String, default="")
    carcass_index = Column(String, default="")
    raw_data_count = Column(Integer, default=0, nullable=False)
    final_or_terminated_report = Column(String, default="")
    amendment_to_final_report = Column(String, default="")
    others = Column(String, default="")
    electronic_data_archived_using_archive_system = Column(Boolean, default=False, nullable=False)
    manually_archiving_data = Column(Boolean, default=False, nullable=False)
    provantis_data = Column(Boolean, default=False, nullable=False)
    empower_data = Column(Boolean, default=False, nullable=False)
    other_electronic_if_any = Column(Boolean, default=False, nullable=False)
    details_of_electronic_data_archived_through = Column(String, default="")
    block_slides_name_box_no = Column(String, default="")
    block_slides_no_of_box = Column(String, default="")
    tissue_box_name_box_no = Column(String, default="")
    tissue_box_no_of_box = Column(String, default="")
    carcass_box_name_box_no = Column(String, default="")
    carcass_box_no_of_box = Column(String, default="")
    study_completion_date = Column(ScalarDate)
    remarks = Column(Text, default="")
    raw_data_items = Column(JSON)

    creator = _creator("Study")

    __table_args__ = (_entity_check("studies"), {"sqlite_autoincrement": True})


class FacilityDoc(ArchivedRecordMixin, Base):
    __tablename__ = "facility_docs"
    dept_section = Column(String, default="")
    date = Column(ScalarDate)
    particulars = Column(String, default="")
    total_no_of_pages = Column(Integer)
    submitted_by = Column(String, default="")
    admin_index_no = Column(String, default="")
    admin_date_of_receipt = Column(ScalarDate)
    admin_date_of_indexing = Column(ScalarDate)
    admin_remarks = Column(Text, default="")

    creator = _creator("FacilityDoc")

    __table_args__ = (_entity_check("facility_docs"), {"sqlite_autoincrement": True})


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, index=True)
    action = Column(String, nullable=False)
    target_type = Column(String)
    target_id = Column(Integer)
    details = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

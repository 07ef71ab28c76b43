"""Pydantic schemas consolidating backend API contracts."""

# purpose: aggregate request and response schemas for FastAPI surfaces and services
# status: active

from .accounts import (
    AccountOut,
    AuthResponse,
    CreatorOut,
    LoginRequest,
    Role,
    SignupRequest,
    normalize_email,
)
from .audit import AuditLogOut
from .records import (
    DeleteResult,
    Entity,
    FacilityDocCreate,
    FacilityDocOut,
    FacilityDocPatch,
    RecordMeta,
    StudyCreate,
    StudyOut,
    StudyPatch,
    TestItemCreate,
    TestItemOut,
    TestItemPatch,
)

__all__ = [
    "AccountOut",
    "AuditLogOut",
    "AuthResponse",
    "CreatorOut",
    "DeleteResult",
    "Entity",
    "FacilityDocCreate",
    "FacilityDocOut",
    "FacilityDocPatch",
    "LoginRequest",
    "RecordMeta",
    "Role",
    "SignupRequest",
    "StudyCreate",
    "StudyOut",
    "StudyPatch",
    "TestItemCreate",
    "TestItemOut",
    "TestItemPatch",
    "normalize_email",
]

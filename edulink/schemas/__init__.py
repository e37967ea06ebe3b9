# edulink/schemas/__init__.py
from .enums import EntityType, FailureKind, UserRole
from .entities import (
    AnyEntityRecord,
    EntityRecord,
    UserRecord,
    ParentProfileRecord,
    TeacherProfileRecord,
    ChildProfileRecord,
    ClassroomRecord,
    ClassroomStudentRecord,
    RECORD_TYPES,
    check_field,
    record_type_for,
)
from .resolution import (
    Hop,
    ReferencePath,
    ResolvedHop,
    ResolutionFailure,
    Resolution,
    ResolutionResponse,
)
from .audit import ReferenceField, OrphanReport, AuditSummary
from .common import ErrorResponse

__all__ = [
    "EntityType",
    "FailureKind",
    "UserRole",
    "AnyEntityRecord",
    "EntityRecord",
    "UserRecord",
    "ParentProfileRecord",
    "TeacherProfileRecord",
    "ChildProfileRecord",
    "ClassroomRecord",
    "ClassroomStudentRecord",
    "RECORD_TYPES",
    "check_field",
    "record_type_for",
    "Hop",
    "ReferencePath",
    "ResolvedHop",
    "ResolutionFailure",
    "Resolution",
    "ResolutionResponse",
    "ReferenceField",
    "OrphanReport",
    "AuditSummary",
    "ErrorResponse",
]

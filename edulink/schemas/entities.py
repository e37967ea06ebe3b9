# edulink/schemas/entities.py
from datetime import datetime
from typing import Annotated, ClassVar, Dict, Optional, Tuple, Type, Union
from pydantic import BaseModel, BeforeValidator, ConfigDict

from edulink.core.errors import UnknownFieldError
from edulink.core.identifiers import canonical_id
from .enums import EntityType, UserRole

EntityId = Annotated[str, BeforeValidator(canonical_id)]


class EntityRecord(BaseModel):
    """Immutable snapshot of one stored entity."""
    entity_type: ClassVar[EntityType]
    id_fields: ClassVar[Tuple[str, ...]] = ("id",)

    id: EntityId

    model_config = ConfigDict(frozen=True, extra="forbid", from_attributes=True)


class UserRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.USER

    email: str
    role: UserRole
    is_active: bool = True


class ParentProfileRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.PARENT_PROFILE
    id_fields: ClassVar[Tuple[str, ...]] = ("id", "user_id")

    user_id: EntityId
    full_name: str
    phone: Optional[str] = None


class TeacherProfileRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.TEACHER_PROFILE
    id_fields: ClassVar[Tuple[str, ...]] = ("id", "user_id")

    user_id: EntityId
    full_name: str
    phone: Optional[str] = None
    school: Optional[str] = None


class ChildProfileRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.CHILD_PROFILE
    id_fields: ClassVar[Tuple[str, ...]] = ("id", "parent_id")

    parent_id: EntityId
    full_name: str
    age: Optional[int] = None
    locale: str = "ar-EG"
    avatar_url: Optional[str] = None
    total_points: int = 0
    is_active: bool = True


class ClassroomRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.CLASSROOM
    id_fields: ClassVar[Tuple[str, ...]] = ("id", "teacher_id")

    teacher_id: EntityId
    name: str
    description: Optional[str] = None
    grade_level: Optional[str] = None
    is_active: bool = True


class ClassroomStudentRecord(EntityRecord):
    entity_type: ClassVar[EntityType] = EntityType.CLASSROOM_STUDENT
    id_fields: ClassVar[Tuple[str, ...]] = ("id", "classroom_id", "child_id")

    classroom_id: EntityId
    child_id: EntityId
    enrolled_at: Optional[datetime] = None


AnyEntityRecord = Union[
    UserRecord,
    ParentProfileRecord,
    TeacherProfileRecord,
    ChildProfileRecord,
    ClassroomRecord,
    ClassroomStudentRecord,
]

RECORD_TYPES: Dict[EntityType, Type[EntityRecord]] = {
    record_type.entity_type: record_type
    for record_type in (
        UserRecord,
        ParentProfileRecord,
        TeacherProfileRecord,
        ChildProfileRecord,
        ClassroomRecord,
        ClassroomStudentRecord,
    )
}


def record_type_for(entity_type: EntityType) -> Type[EntityRecord]:
    return RECORD_TYPES[EntityType(entity_type)]


def check_field(entity_type: EntityType, field: str) -> str:
    """Return the field name, or raise UnknownFieldError if the entity does not declare it."""
    if field not in record_type_for(entity_type).model_fields:
        raise UnknownFieldError(EntityType(entity_type).value, field)
    return field


def is_id_field(entity_type: EntityType, field: str) -> bool:
    return field in record_type_for(entity_type).id_fields

from enum import Enum


class UserRole(str, Enum):
    PARENT = "parent"
    TEACHER = "teacher"
    ADMIN = "admin"


class EntityType(str, Enum):
    USER = "User"
    PARENT_PROFILE = "ParentProfile"
    TEACHER_PROFILE = "TeacherProfile"
    CHILD_PROFILE = "ChildProfile"
    CLASSROOM = "Classroom"
    CLASSROOM_STUDENT = "ClassroomStudent"


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    AMBIGUOUS_REFERENCE = "ambiguous_reference"
    STORE_UNAVAILABLE = "store_unavailable"

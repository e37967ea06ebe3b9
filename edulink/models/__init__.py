from .base import Base, EntityModel
from .user import User
from .parent import ParentProfile
from .teacher import TeacherProfile
from .child import ChildProfile
from .classroom import Classroom, ClassroomStudent

__all__ = [
    'Base',
    'EntityModel',
    'User',
    'ParentProfile',
    'TeacherProfile',
    'ChildProfile',
    'Classroom',
    'ClassroomStudent'
]

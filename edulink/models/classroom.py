from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from edulink.core.identifiers import canonical_id
from .base import EntityModel


class Classroom(EntityModel):
    __tablename__ = "classrooms"
    __id_fields__ = ("id", "teacher_id")

    teacher_id = Column(String(64), nullable=False, index=True)
    name = Column(String, nullable=False)  # e.g., "Grade 2 - A"
    description = Column(String, nullable=True)
    grade_level = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    @validates("id", "teacher_id")
    def _canonical_ids(self, key, value):
        return canonical_id(value)

    def __repr__(self):
        return f"<Classroom(id={self.id}, name={self.name}, teacher_id={self.teacher_id})>"


class ClassroomStudent(EntityModel):
    """Enrollment of a child in a classroom."""
    __tablename__ = "classroom_students"
    __id_fields__ = ("id", "classroom_id", "child_id")

    classroom_id = Column(String(64), nullable=False, index=True)
    child_id = Column(String(64), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now())

    @validates("id", "classroom_id", "child_id")
    def _canonical_ids(self, key, value):
        return canonical_id(value)

    def __repr__(self):
        return f"<ClassroomStudent(classroom_id={self.classroom_id}, child_id={self.child_id})>"

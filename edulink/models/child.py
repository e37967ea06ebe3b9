from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import validates

from edulink.core.identifiers import canonical_id
from .base import EntityModel


class ChildProfile(EntityModel):
    __tablename__ = "child_profiles"
    __id_fields__ = ("id", "parent_id")

    parent_id = Column(String(64), nullable=False, index=True)
    full_name = Column(String, nullable=False)
    age = Column(Integer, nullable=True)
    locale = Column(String, nullable=False, default="ar-EG")
    avatar_url = Column(String, nullable=True)
    total_points = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    @validates("id", "parent_id")
    def _canonical_ids(self, key, value):
        return canonical_id(value)

    def __repr__(self):
        return f"<ChildProfile(id={self.id}, parent_id={self.parent_id})>"

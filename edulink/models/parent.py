from sqlalchemy import Column, String
from sqlalchemy.orm import validates

from edulink.core.identifiers import canonical_id
from .base import EntityModel


class ParentProfile(EntityModel):
    __tablename__ = "parent_profiles"
    __id_fields__ = ("id", "user_id")

    user_id = Column(String(64), nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)

    @validates("id", "user_id")
    def _canonical_ids(self, key, value):
        return canonical_id(value)

    def __repr__(self):
        return f"<ParentProfile(id={self.id}, full_name={self.full_name})>"

from sqlalchemy import Column, String, Boolean, Enum
from sqlalchemy.orm import validates

from edulink.core.identifiers import canonical_id
from edulink.schemas.enums import UserRole
from .base import EntityModel


class User(EntityModel):
    __tablename__ = "users"

    # Uniqueness is a registration rule; duplicates must stay visible here
    email = Column(String, nullable=False, index=True)
    role = Column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    @validates("id")
    def _canonical_ids(self, key, value):
        return canonical_id(value)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

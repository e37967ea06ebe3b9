# base.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from edulink.core.identifiers import new_id

Base = declarative_base()


class EntityModel(Base):
    """
    Common columns for every identity collection.

    Identifiers are canonical strings. Reference columns are plain indexed
    strings rather than database foreign keys, so a dangling reference can be
    stored and later reported.
    """
    __abstract__ = True

    # Names of the columns holding identifiers; canonicalised on write
    __id_fields__ = ("id",)

    id = Column(String(64), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

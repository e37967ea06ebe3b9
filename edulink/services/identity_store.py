# edulink/services/identity_store.py
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from edulink.core.database import build_session_factory
from edulink.core.errors import StoreUnavailableError
from edulink.core.identifiers import canonical_id
from edulink.core.logging import logging
from edulink.models import (
    ChildProfile,
    Classroom,
    ClassroomStudent,
    EntityModel,
    ParentProfile,
    TeacherProfile,
    User,
)
from edulink.schemas.audit import ReferenceField
from edulink.schemas.entities import EntityRecord, check_field, is_id_field, record_type_for
from edulink.schemas.enums import EntityType

logger = logging.getLogger(__name__)

MODELS: Dict[EntityType, Type[EntityModel]] = {
    EntityType.USER: User,
    EntityType.PARENT_PROFILE: ParentProfile,
    EntityType.TEACHER_PROFILE: TeacherProfile,
    EntityType.CHILD_PROFILE: ChildProfile,
    EntityType.CLASSROOM: Classroom,
    EntityType.CLASSROOM_STUDENT: ClassroomStudent,
}

# Errors meaning the backing store could not answer
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class RecordQuery:
    """
    A field-equality query over one collection.

    Nothing is read until the query is iterated, and every iteration issues a
    fresh read, so the same query object can be consumed more than once.
    """

    def __init__(
        self,
        store: "IdentityStore",
        entity_type: EntityType,
        criteria: Dict[str, Any],
        limit: Optional[int] = None
    ):
        self._store = store
        self.entity_type = entity_type
        self.criteria = criteria
        self._limit = limit

    def limit(self, count: int) -> "RecordQuery":
        if count < 1:
            raise ValueError("limit must be positive")
        return RecordQuery(self._store, self.entity_type, self.criteria, limit=count)

    def statement(self):
        model = MODELS[self.entity_type]
        stmt = select(model).order_by(model.id)
        for field, value in self.criteria.items():
            column = getattr(model, field)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        return stmt

    def __aiter__(self) -> AsyncIterator[EntityRecord]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[EntityRecord]:
        # Rows are read and the session closed before the first record is yielded
        records = await self._store._fetch(self.entity_type, self.statement())
        for record in records:
            yield record

    async def all(self) -> List[EntityRecord]:
        return await self._store._fetch(self.entity_type, self.statement())

    def __repr__(self):
        return f"<RecordQuery({self.entity_type.value}, {self.criteria}, limit={self._limit})>"


class IdentityStore:
    """
    Read-only access to the identity collections.

    Every operation opens its own short-lived session from the factory it was
    built with. Reads are point-in-time; nothing is cached between calls.
    Backing-store failures surface as StoreUnavailableError and are never
    retried here.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "IdentityStore":
        return cls(build_session_factory(engine))

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except STORE_ERRORS as e:
            logger.error(f"Identity store read failed during {operation}: {e}")
            raise StoreUnavailableError(e) from e

    def _criteria(self, entity_type: EntityType, criteria: Dict[str, Any]) -> Dict[str, Any]:
        normalized = {}
        for field, value in criteria.items():
            check_field(entity_type, field)
            if value is not None and is_id_field(entity_type, field):
                value = canonical_id(value)
            normalized[field] = value
        return normalized

    async def _fetch(self, entity_type: EntityType, stmt) -> List[EntityRecord]:
        record_type = record_type_for(entity_type)
        async with self._session(f"find {entity_type.value}") as session:
            result = await session.execute(stmt)
            return [record_type.model_validate(row) for row in result.scalars().all()]

    async def get(self, entity_type: EntityType, entity_id: Any) -> Optional[EntityRecord]:
        """Point lookup by id; None when no record has that id."""
        entity_type = EntityType(entity_type)
        model = MODELS[entity_type]
        key = canonical_id(entity_id)
        async with self._session(f"get {entity_type.value}") as session:
            row = await session.get(model, key)
            if row is None:
                return None
            return record_type_for(entity_type).model_validate(row)

    def find_by(self, entity_type: EntityType, **criteria: Any) -> RecordQuery:
        """Records whose fields equal every given value, ordered by id."""
        entity_type = EntityType(entity_type)
        return RecordQuery(self, entity_type, self._criteria(entity_type, criteria))

    async def count(self, entity_type: EntityType, **criteria: Any) -> int:
        entity_type = EntityType(entity_type)
        query = RecordQuery(self, entity_type, self._criteria(entity_type, criteria))
        stmt = select(func.count()).select_from(query.statement().subquery())
        async with self._session(f"count {entity_type.value}") as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def find_dangling(self, reference: ReferenceField) -> List[Tuple[str, str]]:
        """
        (id, value) pairs of records whose reference field names no existing target.

        Anti-join of the source collection against the target's primary keys,
        ordered by source id.
        """
        source = MODELS[reference.entity_type]
        target = aliased(MODELS[reference.target_type])
        column = getattr(source, reference.field)
        stmt = (
            select(source.id, column)
            .outerjoin(target, target.id == column)
            .where(target.id.is_(None))
            .order_by(source.id)
        )
        async with self._session(f"audit {reference}") as session:
            result = await session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]

    async def ping(self) -> bool:
        async with self._session("ping") as session:
            await session.execute(select(1))
        return True

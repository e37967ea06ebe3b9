# edulink/services/consistency_checker.py
import asyncio
from typing import AsyncIterator, Iterable, List, Optional, Sequence

from edulink.core.logging import logging, log_function_call
from edulink.schemas.audit import AuditSummary, OrphanReport, ReferenceField
from edulink.schemas.enums import EntityType
from edulink.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)

# Audited in this order
REFERENCE_FIELDS: Sequence[ReferenceField] = (
    ReferenceField(entity_type=EntityType.PARENT_PROFILE, field="user_id", target_type=EntityType.USER),
    ReferenceField(entity_type=EntityType.TEACHER_PROFILE, field="user_id", target_type=EntityType.USER),
    ReferenceField(entity_type=EntityType.CHILD_PROFILE, field="parent_id", target_type=EntityType.PARENT_PROFILE),
    ReferenceField(entity_type=EntityType.CLASSROOM, field="teacher_id", target_type=EntityType.TEACHER_PROFILE),
    ReferenceField(entity_type=EntityType.CLASSROOM_STUDENT, field="classroom_id", target_type=EntityType.CLASSROOM),
    ReferenceField(entity_type=EntityType.CLASSROOM_STUDENT, field="child_id", target_type=EntityType.CHILD_PROFILE),
)


class ConsistencyChecker:
    """Read-only audit for references that point at no existing record."""

    def __init__(self, store: IdentityStore, references: Sequence[ReferenceField] = REFERENCE_FIELDS):
        self.store = store
        self.references = tuple(references)

    def _selected(self, entity_types: Optional[Iterable[EntityType]]) -> List[ReferenceField]:
        if entity_types is None:
            return list(self.references)
        wanted = {EntityType(entity_type) for entity_type in entity_types}
        return [reference for reference in self.references if reference.entity_type in wanted]

    async def iter_orphans(
        self,
        entity_types: Optional[Iterable[EntityType]] = None
    ) -> AsyncIterator[OrphanReport]:
        """
        Stream an OrphanReport for every dangling reference.

        All reference lookups start at once; reports come out reference by
        reference in audit order as each lookup finishes. A store failure is
        raised as StoreUnavailableError and the remaining lookups are cancelled.
        """
        references = self._selected(entity_types)
        tasks = [
            asyncio.ensure_future(self.store.find_dangling(reference))
            for reference in references
        ]
        try:
            for reference, task in zip(references, tasks):
                dangling = await task
                if dangling:
                    logger.info(f"{len(dangling)} orphaned reference(s) on {reference}")
                for entity_id, value in dangling:
                    yield OrphanReport(
                        entity_type=reference.entity_type,
                        entity_id=entity_id,
                        dangling_field=reference.field,
                        dangling_value=value,
                    )
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Collect cancelled or failed siblings so none is left unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)

    @log_function_call(logger)
    async def audit(self, entity_types: Optional[Iterable[EntityType]] = None) -> AuditSummary:
        reports = [report async for report in self.iter_orphans(entity_types)]
        summary = AuditSummary.from_reports(reports)
        logger.info(f"Consistency audit finished with {summary.total} orphaned reference(s)")
        return summary

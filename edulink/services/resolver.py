# edulink/services/resolver.py
import asyncio
from typing import Any, List, Optional, Sequence, Tuple

from edulink.core.errors import ResolutionCancelled, StoreUnavailableError, ValidationError
from edulink.core.identifiers import canonical_id
from edulink.core.logging import logging
from edulink.schemas.entities import AnyEntityRecord, is_id_field
from edulink.schemas.enums import FailureKind
from edulink.schemas.resolution import (
    Hop,
    ReferencePath,
    Resolution,
    ResolutionFailure,
    ResolvedHop,
)
from edulink.services.identity_store import IdentityStore
from edulink.services import paths

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """
    Walks a ReferencePath through the identity store one hop at a time.

    Each hop's key comes from the record resolved at the previous hop, so a
    chain is strictly sequential. Resolution stops at the first hop that does
    not produce exactly one record (or, for a final one-to-many hop, a list)
    and reports that hop; no missing value is ever defaulted.
    """

    def __init__(self, store: IdentityStore):
        self.store = store

    def _lookup_key(self, hop: Hop, value: Any) -> str:
        if is_id_field(hop.entity_type, hop.match_field):
            return canonical_id(value)
        if not isinstance(value, str):
            raise ValidationError(
                f"{hop.entity_type.value}.{hop.match_field} lookup needs a string, "
                f"got {type(value).__name__}"
            )
        return value

    def _failure_message(
        self,
        kind: FailureKind,
        path: ReferencePath,
        index: int,
        key: Optional[str]
    ) -> str:
        hop = path.hops[index - 1]
        source = ""
        if index > 1:
            source = f" (from {path.hops[index - 2].entity_type.value}.{hop.join_field})"
        target = f"{hop.entity_type.value} with {hop.match_field}={key!r}{source}"
        if kind == FailureKind.NOT_FOUND:
            return f"Hop {index} of {path.name}: no {target}"
        if kind == FailureKind.AMBIGUOUS_REFERENCE:
            return f"Hop {index} of {path.name}: more than one {target}"
        return f"Hop {index} of {path.name}: store unavailable while reading {target}"

    def _fail(
        self,
        path: ReferencePath,
        root_key: str,
        chain: List[ResolvedHop],
        kind: FailureKind,
        index: int,
        key: Optional[str],
        cause: Optional[str] = None
    ) -> Resolution:
        hop = path.hops[index - 1]
        failure = ResolutionFailure(
            kind=kind,
            hop=index,
            entity_type=hop.entity_type,
            key=key,
            message=self._failure_message(kind, path, index, key),
            cause=cause,
        )
        logger.warning(
            failure.message,
            extra={"path": path.name, "hop": index, "entity_type": hop.entity_type.value}
        )
        return Resolution(path=path.name, key=root_key, chain=tuple(chain), failure=failure)

    async def resolve(
        self,
        path: ReferencePath,
        key: Any,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        """
        Resolve ``key`` along ``path``.

        Args:
            path: The hops to walk
            key: Lookup value for the first hop
            cancel: Checked before each hop; once set, ResolutionCancelled is
                raised and nothing resolved so far is returned

        Returns:
            Resolution with the full chain, or the failure at the first bad hop
        """
        root_key = self._lookup_key(path.hops[0], key)
        chain: List[ResolvedHop] = []
        previous: Optional[AnyEntityRecord] = None

        for index, hop in enumerate(path.hops, start=1):
            if cancel is not None and cancel.is_set():
                logger.info(f"Resolution of {path.name} cancelled before hop {index}")
                raise ResolutionCancelled(path.name, index)

            if previous is None:
                hop_key: Optional[str] = root_key
            else:
                hop_key = getattr(previous, hop.join_field)
                if hop_key is None:
                    return self._fail(path, root_key, chain, FailureKind.NOT_FOUND, index, None)

            query = self.store.find_by(hop.entity_type, **{hop.match_field: hop_key})
            if not hop.many:
                # Two rows are enough to tell unique from ambiguous
                query = query.limit(2)

            try:
                records: Tuple[AnyEntityRecord, ...] = tuple(await query.all())
            except StoreUnavailableError as e:
                return self._fail(
                    path, root_key, chain, FailureKind.STORE_UNAVAILABLE, index, hop_key,
                    cause=str(e.cause)
                )

            if not hop.many:
                if not records:
                    return self._fail(path, root_key, chain, FailureKind.NOT_FOUND, index, hop_key)
                if len(records) > 1:
                    return self._fail(
                        path, root_key, chain, FailureKind.AMBIGUOUS_REFERENCE, index, hop_key
                    )
                previous = records[0]

            chain.append(ResolvedHop(
                hop=index,
                entity_type=hop.entity_type,
                key=hop_key,
                records=records,
            ))

        return Resolution(path=path.name, key=root_key, chain=tuple(chain))

    async def resolve_all(
        self,
        path: ReferencePath,
        keys: Sequence[Any],
        cancel: Optional[asyncio.Event] = None
    ) -> List[Resolution]:
        """Resolve independent keys concurrently; results keep the order of ``keys``."""
        return list(await asyncio.gather(
            *(self.resolve(path, key, cancel=cancel) for key in keys)
        ))

    async def resolve_user_to_children(
        self,
        email: str,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        return await self.resolve(paths.USER_TO_CHILDREN, email, cancel=cancel)

    async def resolve_user_to_classrooms(
        self,
        email: str,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        return await self.resolve(paths.USER_TO_CLASSROOMS, email, cancel=cancel)

    async def resolve_child_to_parent_user(
        self,
        child_id: Any,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        return await self.resolve(paths.CHILD_TO_PARENT_USER, child_id, cancel=cancel)

    async def resolve_classroom_to_teacher_user(
        self,
        classroom_id: Any,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        return await self.resolve(paths.CLASSROOM_TO_TEACHER_USER, classroom_id, cancel=cancel)

    async def resolve_classroom_roster(
        self,
        classroom_id: Any,
        cancel: Optional[asyncio.Event] = None
    ) -> Resolution:
        return await self.resolve(paths.CLASSROOM_ROSTER, classroom_id, cancel=cancel)

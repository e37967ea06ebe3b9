# edulink/schemas/resolution.py
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

from edulink.core.errors import (
    AmbiguousReferenceError,
    BaseAPIError,
    ReferenceNotFoundError,
    StoreUnavailableError,
)
from .entities import AnyEntityRecord, check_field
from .enums import EntityType, FailureKind


class Hop(BaseModel):
    """
    One join step of a path.

    The record at this hop is the one whose ``match_field`` equals the key.
    On the first hop the key is supplied by the caller; on later hops it is
    the previous record's ``join_field`` value.
    """
    entity_type: EntityType
    match_field: str
    join_field: str = "id"
    many: bool = False

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_match_field(self) -> "Hop":
        check_field(self.entity_type, self.match_field)
        return self

    def describe(self, previous: Optional["Hop"] = None) -> str:
        marker = "*" if self.many else ""
        if previous is None:
            return f"{self.entity_type.value}{marker}(by {self.match_field})"
        return (
            f"{self.entity_type.value}{marker}"
            f"({self.match_field}={previous.entity_type.value}.{self.join_field})"
        )


class ReferencePath(BaseModel):
    """Ordered hops describing one relationship traversal."""
    name: str
    hops: Tuple[Hop, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_hops(self) -> "ReferencePath":
        if not self.hops:
            raise ValueError(f"Path '{self.name}' has no hops")
        for index, hop in enumerate(self.hops):
            if hop.many and index != len(self.hops) - 1:
                raise ValueError(
                    f"Path '{self.name}': only the last hop may be one-to-many (hop {index + 1})"
                )
            if index > 0:
                check_field(self.hops[index - 1].entity_type, hop.join_field)
        return self

    def describe(self) -> str:
        parts = []
        previous = None
        for hop in self.hops:
            parts.append(hop.describe(previous))
            previous = hop
        return " -> ".join(parts)


class ResolvedHop(BaseModel):
    hop: int
    entity_type: EntityType
    key: Optional[str] = None
    records: Tuple[AnyEntityRecord, ...] = ()

    model_config = ConfigDict(frozen=True)


class ResolutionFailure(BaseModel):
    kind: FailureKind
    hop: int
    entity_type: EntityType
    key: Optional[str] = None
    message: str
    cause: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def to_exception(self) -> BaseAPIError:
        if self.kind == FailureKind.NOT_FOUND:
            return ReferenceNotFoundError(
                self.hop, self.entity_type.value, self.key, message=self.message
            )
        if self.kind == FailureKind.AMBIGUOUS_REFERENCE:
            return AmbiguousReferenceError(
                self.hop, self.entity_type.value, self.key, message=self.message
            )
        return StoreUnavailableError(self.cause or self.message, hop=self.hop)


class Resolution(BaseModel):
    """Outcome of walking one path: the resolved chain, or the hop that failed."""
    path: str
    key: str
    chain: Tuple[ResolvedHop, ...] = ()
    failure: Optional[ResolutionFailure] = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def records(self) -> Tuple[AnyEntityRecord, ...]:
        """Records of the final hop, empty if resolution failed."""
        if not self.ok or not self.chain:
            return ()
        return self.chain[-1].records

    def record_at(self, hop: int) -> Optional[AnyEntityRecord]:
        """The single record resolved at a one-to-one hop (1-based)."""
        for resolved in self.chain:
            if resolved.hop == hop:
                return resolved.records[0] if len(resolved.records) == 1 else None
        return None

    def raise_for_failure(self) -> "Resolution":
        if self.failure is not None:
            raise self.failure.to_exception()
        return self


class ResolutionResponse(BaseModel):
    """Envelope returned by the diagnostics API."""
    success: bool = True
    path: str
    description: str
    key: str
    chain: Tuple[ResolvedHop, ...] = Field(default_factory=tuple)
    records: Tuple[AnyEntityRecord, ...] = Field(default_factory=tuple)

    @classmethod
    def from_resolution(cls, resolution: Resolution, path: ReferencePath) -> "ResolutionResponse":
        return cls(
            path=resolution.path,
            description=path.describe(),
            key=resolution.key,
            chain=resolution.chain,
            records=resolution.records,
        )

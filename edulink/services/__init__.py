from .identity_store import IdentityStore, RecordQuery
from .resolver import ReferenceResolver
from .consistency_checker import ConsistencyChecker, REFERENCE_FIELDS

__all__ = [
    "IdentityStore",
    "RecordQuery",
    "ReferenceResolver",
    "ConsistencyChecker",
    "REFERENCE_FIELDS"
]

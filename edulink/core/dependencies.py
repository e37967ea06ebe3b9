from fastapi import Depends, Request

from edulink.core.errors import StoreUnavailableError
from edulink.services.identity_store import IdentityStore
from edulink.services.resolver import ReferenceResolver
from edulink.services.consistency_checker import ConsistencyChecker


def get_store(request: Request) -> IdentityStore:
    """Provide the process-wide IdentityStore held on the application state"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError("identity store not initialised")
    return store


async def get_resolver(store: IdentityStore = Depends(get_store)) -> ReferenceResolver:
    return ReferenceResolver(store)


async def get_consistency_checker(store: IdentityStore = Depends(get_store)) -> ConsistencyChecker:
    return ConsistencyChecker(store)

from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from edulink.core.dependencies import get_consistency_checker, get_resolver, get_store
from edulink.schemas import AuditSummary, EntityType, OrphanReport, ResolutionResponse
from edulink.schemas.common import ErrorResponse
from edulink.services import paths
from edulink.services.consistency_checker import ConsistencyChecker
from edulink.services.identity_store import IdentityStore
from edulink.services.resolver import ReferenceResolver

router = APIRouter()

RESOLUTION_ERRORS = {
    404: {"model": ErrorResponse, "description": "A hop matched no record"},
    409: {"model": ErrorResponse, "description": "A one-to-one hop matched several records"},
    503: {"model": ErrorResponse, "description": "Identity store unavailable"},
}


@router.get("/health")
async def health(store: IdentityStore = Depends(get_store)):
    await store.ping()
    return {"status": "ok"}


@router.get("/users/{email}/children", response_model=ResolutionResponse, responses=RESOLUTION_ERRORS)
async def user_children(email: str, resolver: ReferenceResolver = Depends(get_resolver)):
    resolution = await resolver.resolve_user_to_children(email)
    resolution.raise_for_failure()
    return ResolutionResponse.from_resolution(resolution, paths.USER_TO_CHILDREN)


@router.get("/users/{email}/classrooms", response_model=ResolutionResponse, responses=RESOLUTION_ERRORS)
async def user_classrooms(email: str, resolver: ReferenceResolver = Depends(get_resolver)):
    resolution = await resolver.resolve_user_to_classrooms(email)
    resolution.raise_for_failure()
    return ResolutionResponse.from_resolution(resolution, paths.USER_TO_CLASSROOMS)


@router.get("/children/{child_id}/parent", response_model=ResolutionResponse, responses=RESOLUTION_ERRORS)
async def child_parent(child_id: str, resolver: ReferenceResolver = Depends(get_resolver)):
    resolution = await resolver.resolve_child_to_parent_user(child_id)
    resolution.raise_for_failure()
    return ResolutionResponse.from_resolution(resolution, paths.CHILD_TO_PARENT_USER)


@router.get("/classrooms/{classroom_id}/teacher", response_model=ResolutionResponse, responses=RESOLUTION_ERRORS)
async def classroom_teacher(classroom_id: str, resolver: ReferenceResolver = Depends(get_resolver)):
    resolution = await resolver.resolve_classroom_to_teacher_user(classroom_id)
    resolution.raise_for_failure()
    return ResolutionResponse.from_resolution(resolution, paths.CLASSROOM_TO_TEACHER_USER)


@router.get("/classrooms/{classroom_id}/students", response_model=ResolutionResponse, responses=RESOLUTION_ERRORS)
async def classroom_students(classroom_id: str, resolver: ReferenceResolver = Depends(get_resolver)):
    resolution = await resolver.resolve_classroom_roster(classroom_id)
    resolution.raise_for_failure()
    return ResolutionResponse.from_resolution(resolution, paths.CLASSROOM_ROSTER)


@router.get("/orphans/summary", response_model=AuditSummary)
async def orphan_summary(
    entity_type: Optional[List[EntityType]] = Query(None),
    checker: ConsistencyChecker = Depends(get_consistency_checker)
):
    return await checker.audit(entity_type)


@router.get("/orphans", responses={200: {"content": {"application/x-ndjson": {}}}})
async def orphans(
    entity_type: Optional[List[EntityType]] = Query(None),
    checker: ConsistencyChecker = Depends(get_consistency_checker)
):
    """Stream orphan reports as newline-delimited JSON."""
    reports = checker.iter_orphans(entity_type)
    # Pull the first report here so a store failure still maps to an error status
    try:
        first: Optional[OrphanReport] = await reports.__anext__()
    except StopAsyncIteration:
        first = None

    async def lines() -> AsyncIterator[str]:
        if first is None:
            return
        yield first.model_dump_json() + "\n"
        async for report in reports:
            yield report.model_dump_json() + "\n"

    return StreamingResponse(lines(), media_type="application/x-ndjson")

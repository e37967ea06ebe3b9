import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from edulink.core.errors import StoreUnavailableError, UnknownFieldError
from edulink.schemas import ChildProfileRecord, EntityType, ReferenceField, UserRecord
from edulink.models import ChildProfile
from edulink.schemas.enums import UserRole


async def test_get_returns_frozen_snapshot(store, family):
    user = await store.get(EntityType.USER, "U1")
    assert isinstance(user, UserRecord)
    assert user.id == "U1"
    assert user.email == "parent@example.eg"
    assert user.role == UserRole.PARENT

    with pytest.raises(ValidationError):
        user.email = "changed@example.eg"


async def test_get_missing_returns_none(store, family):
    assert await store.get(EntityType.CHILD_PROFILE, "C404") is None


async def test_find_by_canonicalises_identifier_criteria(store, family):
    children = await store.find_by(EntityType.CHILD_PROFILE, parent_id="  P1 ").all()
    assert [child.id for child in children] == ["C1"]
    assert all(isinstance(child, ChildProfileRecord) for child in children)


async def test_find_by_is_lazy_and_restartable(store, add, family):
    query = store.find_by(EntityType.CHILD_PROFILE)
    first = [child.id async for child in query]
    assert first == ["C1", "C2"]

    await add(ChildProfile(id="C3", parent_id="P1", full_name="Omar"))

    second = [child.id async for child in query]
    assert second == ["C1", "C2", "C3"]


async def test_find_by_limit(store, family):
    children = await store.find_by(EntityType.CHILD_PROFILE).limit(1).all()
    assert len(children) == 1


async def test_unknown_field_is_rejected(store):
    with pytest.raises(UnknownFieldError):
        store.find_by(EntityType.USER, password="secret")


async def test_count(store, family):
    assert await store.count(EntityType.CHILD_PROFILE) == 2
    assert await store.count(EntityType.CHILD_PROFILE, parent_id="P1") == 1


async def test_find_dangling(store, family):
    reference = ReferenceField(
        entity_type=EntityType.CHILD_PROFILE, field="parent_id", target_type=EntityType.PARENT_PROFILE
    )
    assert await store.find_dangling(reference) == [("C2", "P9")]


async def test_backing_store_errors_surface_as_store_unavailable(store, monkeypatch):
    class BrokenSession:
        async def __aenter__(self):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        async def __aexit__(self, *exc):
            return False

    monkeypatch.setattr(store, "session_factory", lambda: BrokenSession())

    with pytest.raises(StoreUnavailableError) as exc_info:
        await store.get(EntityType.USER, "U1")
    assert exc_info.value.status_code == 503
    assert "database is locked" in exc_info.value.details["cause"]

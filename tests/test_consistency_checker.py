import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from edulink.core.errors import StoreUnavailableError
from edulink.models import ChildProfile, Classroom, ClassroomStudent, ParentProfile, TeacherProfile, User
from edulink.schemas import EntityType, OrphanReport
from edulink.schemas.enums import UserRole
from edulink.services.consistency_checker import ConsistencyChecker


@pytest.fixture
def checker(store):
    return ConsistencyChecker(store)


async def collect(checker, entity_types=None):
    return [report async for report in checker.iter_orphans(entity_types)]


async def test_family_scenario_reports_the_orphaned_child(checker, family):
    assert await collect(checker) == [
        OrphanReport(
            entity_type=EntityType.CHILD_PROFILE,
            entity_id="C2",
            dangling_field="parent_id",
            dangling_value="P9",
        )
    ]


async def test_clean_store_reports_nothing(checker, school):
    assert await collect(checker) == []


async def test_classroom_with_missing_teacher(checker, add, school):
    await add(Classroom(id="R9", teacher_id="T404", name="Ghost class"))

    reports = await collect(checker)

    assert len(reports) == 1
    assert reports[0].entity_type == EntityType.CLASSROOM
    assert reports[0].entity_id == "R9"
    assert reports[0].dangling_field == "teacher_id"


async def test_profiles_and_enrollments_are_audited_in_order(checker, add, enrollment):
    await add(
        ParentProfile(id="P8", user_id="U404", full_name="No Account"),
        TeacherProfile(id="T8", user_id="U405", full_name="No Account Either"),
        ClassroomStudent(id="E9", classroom_id="R404", child_id="C404"),
    )

    reports = await collect(checker)

    assert [(r.entity_type, r.entity_id, r.dangling_field) for r in reports] == [
        (EntityType.PARENT_PROFILE, "P8", "user_id"),
        (EntityType.TEACHER_PROFILE, "T8", "user_id"),
        (EntityType.CHILD_PROFILE, "C2", "parent_id"),
        (EntityType.CLASSROOM_STUDENT, "E9", "classroom_id"),
        (EntityType.CLASSROOM_STUDENT, "E9", "child_id"),
    ]


async def test_entity_type_filter(checker, add, family):
    await add(Classroom(id="R9", teacher_id="T404", name="Ghost class"))

    reports = await collect(checker, [EntityType.CLASSROOM])

    assert [r.entity_id for r in reports] == ["R9"]


async def test_audit_summary(checker, add, family):
    await add(Classroom(id="R9", teacher_id="T404", name="Ghost class"))

    summary = await checker.audit()

    assert summary.total == 2
    assert summary.by_entity_type == {"ChildProfile": 1, "Classroom": 1}


async def test_checker_does_not_write(checker, store, family):
    before = await store.count(EntityType.CHILD_PROFILE)
    await checker.audit()
    await checker.audit()
    assert await store.count(EntityType.CHILD_PROFILE) == before


async def test_store_failure_is_surfaced(checker, store, monkeypatch):
    async def broken(reference):
        raise StoreUnavailableError(OperationalError("SELECT", {}, Exception("connection refused")))

    monkeypatch.setattr(store, "find_dangling", broken)

    with pytest.raises(StoreUnavailableError):
        await collect(checker)


async def test_ids_differing_only_in_case_are_reported(checker, add):
    await add(
        User(id="UA", email="case@example.eg", role=UserRole.PARENT),
        ParentProfile(id="pa", user_id="UA", full_name="Lower Case"),
        ChildProfile(id="K1", parent_id="PA", full_name="Upper Case Link"),
    )

    assert await collect(checker) == [
        OrphanReport(
            entity_type=EntityType.CHILD_PROFILE,
            entity_id="K1",
            dangling_field="parent_id",
            dangling_value="PA",
        )
    ]


async def test_reference_lookups_run_concurrently(checker, store, monkeypatch):
    events = []
    in_flight = 0
    peak = 0

    async def slow_find_dangling(reference):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        events.append(("start", reference.field))
        await asyncio.sleep(0.01)
        events.append(("end", reference.field))
        in_flight -= 1
        return []

    monkeypatch.setattr(store, "find_dangling", slow_find_dangling)

    assert await collect(checker) == []

    assert peak == len(checker.references)
    assert [kind for kind, _ in events[:len(checker.references)]] == ["start"] * len(checker.references)

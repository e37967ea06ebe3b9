import pytest_asyncio

from edulink.core.config import Settings
from edulink.core.database import build_engine, build_session_factory, close_db, init_db, session_scope
from edulink.models import ChildProfile, Classroom, ClassroomStudent, ParentProfile, TeacherProfile, User
from edulink.schemas.enums import UserRole
from edulink.services.identity_store import IdentityStore


@pytest_asyncio.fixture
async def engine(tmp_path):
    config = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'edulink-test.db'}")
    engine = build_engine(config)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def store(session_factory):
    return IdentityStore(session_factory)


@pytest_asyncio.fixture
async def add(session_factory):
    """Insert ORM rows directly, standing in for the registration services."""
    async def _add(*rows):
        async with session_scope(session_factory) as session:
            session.add_all(rows)
    return _add


@pytest_asyncio.fixture
async def family(add):
    """The parent@example.eg scenario: one linked child and one orphan."""
    await add(
        User(id="U1", email="parent@example.eg", role=UserRole.PARENT),
        ParentProfile(id="P1", user_id="U1", full_name="Ahmed Mohamed"),
        ChildProfile(id="C1", parent_id="P1", full_name="Amal", age=7),
        ChildProfile(id="C2", parent_id="P9", full_name="Zayd", age=6),
    )


@pytest_asyncio.fixture
async def school(add):
    await add(
        User(id="U2", email="teacher@school.eg", role=UserRole.TEACHER),
        TeacherProfile(id="T1", user_id="U2", full_name="Fatima Ali", school="Future School"),
        Classroom(id="R1", teacher_id="T1", name="Grade 2 - A", grade_level="Grade 2"),
        Classroom(id="R2", teacher_id="T1", name="Grade 2 - B", grade_level="Grade 2"),
    )


@pytest_asyncio.fixture
async def enrollment(add, family, school):
    await add(
        ClassroomStudent(id="E1", classroom_id="R1", child_id="C1"),
    )

import json

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from edulink import create_app
from edulink.core.config import Settings
from edulink.core.errors import StoreUnavailableError
from edulink.models import User
from edulink.schemas.enums import UserRole

PREFIX = "/api/v1/diagnostics"


@pytest_asyncio.fixture
async def client(store):
    app = create_app(store=store)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def test_health(client):
    response = await client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


async def test_user_children(client, family):
    response = await client.get(f"{PREFIX}/users/parent@example.eg/children")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["path"] == "user_to_children"
    assert [record["id"] for record in body["records"]] == ["C1"]
    assert body["records"][0]["full_name"] == "Amal"


async def test_missing_profile_maps_to_404_with_hop(client, add):
    await add(User(id="U7", email="lonely@example.eg", role=UserRole.PARENT))

    response = await client.get(f"{PREFIX}/users/lonely@example.eg/children")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "REFERENCE_NOT_FOUND"
    assert body["details"] == {"hop": 2, "entity_type": "ParentProfile", "key": "U7"}


async def test_duplicate_email_maps_to_409(client, add, family):
    await add(User(id="U8", email="parent@example.eg", role=UserRole.PARENT))

    response = await client.get(f"{PREFIX}/users/parent@example.eg/children")

    assert response.status_code == 409
    assert response.json()["details"]["hop"] == 1


async def test_classroom_teacher_and_students(client, enrollment):
    teacher = await client.get(f"{PREFIX}/classrooms/R1/teacher")
    students = await client.get(f"{PREFIX}/classrooms/R1/students")

    assert teacher.status_code == 200
    assert teacher.json()["records"][0]["email"] == "teacher@school.eg"
    assert [entry["child_id"] for entry in students.json()["records"]] == ["C1"]


async def test_child_parent_dangling(client, family):
    response = await client.get(f"{PREFIX}/children/C2/parent")

    assert response.status_code == 404
    assert response.json()["details"]["key"] == "P9"


async def test_orphans_stream(client, family, school):
    response = await client.get(f"{PREFIX}/orphans")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in response.text.splitlines() if line]
    assert lines == [{
        "entity_type": "ChildProfile",
        "entity_id": "C2",
        "dangling_field": "parent_id",
        "dangling_value": "P9",
    }]


async def test_orphans_stream_empty(client, school):
    response = await client.get(f"{PREFIX}/orphans")

    assert response.status_code == 200
    assert response.text == ""


async def test_orphans_summary_filter(client, family):
    response = await client.get(f"{PREFIX}/orphans/summary", params={"entity_type": "Classroom"})

    assert response.status_code == 200
    assert response.json() == {"total": 0, "by_entity_type": {}, "orphans": []}


async def test_store_unavailable_maps_to_503(client, store, monkeypatch):
    async def broken(reference):
        raise StoreUnavailableError(OperationalError("SELECT", {}, Exception("connection refused")))

    monkeypatch.setattr(store, "find_dangling", broken)

    response = await client.get(f"{PREFIX}/orphans")

    assert response.status_code == 503
    assert response.json()["error_code"] == "STORE_UNAVAILABLE"


@pytest.mark.parametrize("path", ["/children/%20/parent", "/classrooms/%20/teacher"])
async def test_blank_identifier_maps_to_422(client, path):
    response = await client.get(f"{PREFIX}{path}")

    assert response.status_code == 422
    assert response.json()["error_code"] == "INVALID_IDENTIFIER"


async def test_create_app_takes_settings(store):
    config = Settings(APP_NAME="Edulink Staging", DATABASE_URL="sqlite+aiosqlite:///:memory:")
    app = create_app(settings=config, store=store)
    assert app.title == "Edulink Staging"
    assert app.state.settings is config

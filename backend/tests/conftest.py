from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from directory.main import app
from directory.models.employee import Employee

SAMPLE_COSMOS_DOC = {
    "id": "3f2a9c0d1e",
    "kind": "employee",
    "name": "Ann Lee",
    "email": "ann@co.com",
    "phone": "+1 555 0100",
    "department": "Engineering",
    "position": "Engineer",
    "joiningDate": "2024-03-01",
    "createdAt": "2024-03-01T09:30:00+00:00",
    "updatedAt": "2024-03-01T09:30:00+00:00",
    "_rid": "abc==",
    "_etag": '"0000"',
    "_ts": 1709285400,
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sample_doc():
    return dict(SAMPLE_COSMOS_DOC)


def _make_employee(employee_id: str = "e1", name: str = "Ann Lee", **overrides) -> Employee:
    data = {
        "id": employee_id,
        "name": name,
        "email": f"{name.split()[0].lower()}@co.com",
        "phone": "",
        "department": "Engineering",
        "position": "Engineer",
        "joiningDate": "2024-03-01",
    }
    data.update(overrides)
    return Employee.model_validate(data)


@pytest.fixture
def make_employee():
    return _make_employee

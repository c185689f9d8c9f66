"""Shared fixtures for the FarmLedger test suite.

Every test gets a fresh in-memory SQLite database. The engine keeps a single
connection (StaticPool), so disposing it at teardown throws the data away.
"""
import os

# Point the app at in-memory SQLite before any farmledger module is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402 (must follow env setup)

from farmledger.database import Base, async_session_maker, engine  # noqa: E402
from farmledger.main import app  # noqa: E402


# ── HTTP clients ─────────────────────────────────────────────────────

@pytest.fixture
def client():
    """TestClient with the lifespan running, so tables exist."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client():
    """TestClient that returns 500 responses instead of re-raising."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
async def db_session():
    """AsyncSession on freshly created tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_maker() as session:
        yield session
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def http_client(db_session):
    """httpx.AsyncClient wired straight to the ASGI app (no lifespan)."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ── Sample payloads ──────────────────────────────────────────────────

@pytest.fixture
def employee_payload():
    """A valid create body for /api/employee."""
    return {
        "fullName": "Asha Rao",
        "age": 30,
        "gender": "FEMALE",
        "maritalStatus": "MARRIED",
        "phoneNumber": "9876543210",
        "aadharNumber": "123412341234",
        "salary": 15000.5,
        "workEmployedToDo": "Feeding and egg collection",
    }


@pytest.fixture
def make_employee(employee_payload):
    """Build a valid employee body with a unique Aadhar number per ``n``."""
    def _make(n: int, **overrides):
        body = dict(employee_payload)
        body["fullName"] = f"Worker {n:03d}"
        body["aadharNumber"] = f"{n:012d}"
        body.update(overrides)
        return body
    return _make


@pytest.fixture
def inventory_payload():
    """A valid create body for /api/egg-inventory."""
    return {"date": "2024-05-01", "crack_eggs": 10, "jumbo_eggs": 20, "normal_eggs": 70}

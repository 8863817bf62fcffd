"""Shared test fixtures for Keymint."""

import pytest
from httpx import ASGITransport, AsyncClient


SECRET_KEY = "test-secret-key-for-unit-tests"
DB_URL = "sqlite+aiosqlite://"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"
OPERATOR_EMAIL = "operator@example.com"
OPERATOR_PASSWORD = "not-an-admin-pass"


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("KEYMINT_DB_URL", DB_URL)
    monkeypatch.setenv("KEYMINT_SECRET_KEY", SECRET_KEY)

    # Clear caches and singletons so new env vars take effect
    from keymint.common.config import get_settings
    get_settings.cache_clear()

    from keymint.deps import reset_singletons
    reset_singletons()
    yield
    get_settings.cache_clear()
    reset_singletons()


@pytest.fixture
def settings():
    from keymint.common.config import get_settings
    return get_settings()


@pytest.fixture
async def db(settings):
    """Initialized in-memory database with all tables."""
    from keymint.common.database import DatabaseManager

    manager = DatabaseManager(settings)
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


async def _seed(db):
    from keymint.admin.service import AdminService
    from keymint.identity.service import OperatorService

    operators = OperatorService()
    async with db.get_session() as session:
        admin = await operators.create_operator(session, ADMIN_EMAIL, ADMIN_PASSWORD)
        operator = await operators.create_operator(session, OPERATOR_EMAIL, OPERATOR_PASSWORD)
        await AdminService().grant(session, admin.id)
    return admin, operator


@pytest.fixture
async def accounts(db):
    """(admin_operator, plain_operator) registered in the db fixture."""
    return await _seed(db)


@pytest.fixture
def app():
    from keymint.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from keymint.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()
    await _seed(db)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


async def _login_headers(client, email, password):
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def admin_headers(client):
    return await _login_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
async def operator_headers(client):
    return await _login_headers(client, OPERATOR_EMAIL, OPERATOR_PASSWORD)

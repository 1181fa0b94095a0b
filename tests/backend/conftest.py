import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from vidhub.core import db as db_module
from vidhub.core.security import hash_password
from vidhub.main import app
from vidhub.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh database without an HTTP client (service-level tests)."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    The base URL is plain http, so Secure cookies are received but never
    sent back automatically; tests pass tokens explicitly.
    """
    await _init_test_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest.fixture
def fake_uploader(monkeypatch):
    """
    Replace the Cloudinary uploader used by the users router with an async
    fake. ``calls`` records every local path passed in; set ``fail = True``
    to simulate a failed upload, or ``error`` to an exception to raise it.
    """

    class FakeUploader:
        def __init__(self):
            self.calls: list[str | None] = []
            self.fail = False
            self.error: Exception | None = None

        async def __call__(self, local_file_path):
            self.calls.append(local_file_path)
            if self.error is not None:
                raise self.error
            if not local_file_path:
                return None
            if local_file_path and os.path.exists(local_file_path):
                os.remove(local_file_path)
            if self.fail:
                return None
            return {"url": f"http://res.cloudinary.test/{uuid.uuid4().hex}.png"}

    fake = FakeUploader()
    monkeypatch.setattr("vidhub.api.v1.routers.users.upload_on_cloudinary", fake)
    return fake


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point multipart temp storage at a per-test directory."""
    from vidhub.config import settings

    monkeypatch.setattr(settings, "upload_temp_dir", str(tmp_path / "temp"))
    return tmp_path / "temp"


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23") -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        user = await User.create(
            fullname=f"User {suffix}",
            username=f"user_{suffix}",
            email=f"{suffix}@example.com",
            password=hash_password(password),
            avatar="http://res.cloudinary.test/avatar.png",
        )
        return user, password

    return _create_user

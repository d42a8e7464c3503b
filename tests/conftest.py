import os
from contextvars import ContextVar


os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["PUBLIC_BASE_URL"] = "https://book.example.com"

from datetime import timedelta  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import AsyncIterator, Callable  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from slotlink.app import app  # noqa: E402
from slotlink.database import db  # noqa: E402
from slotlink.database.database import DB, create_engine  # noqa: E402
from slotlink.redis import auth_redis  # noqa: E402
from slotlink.utils.jwt import encode_jwt  # noqa: E402


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[DB]:
    db.engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'slotlink.db'}")
    await db.create_tables()
    yield db
    await db.engine.dispose()


@pytest.fixture
async def session(database: DB, monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[DB]:
    # the test body does not run in this fixture's context
    s = database.create_session()
    monkeypatch.setattr(database, "_session", ContextVar("session", default=s))
    yield database
    await s.close()


@pytest.fixture
async def client(database: DB, monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncClient]:
    monkeypatch.setattr(auth_redis, "exists", AsyncMock(return_value=0))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def make(user_id: str, admin: bool = False) -> dict[str, str]:
        token = encode_jwt({"uid": user_id, "rt": f"rt-{user_id}", "data": {"admin": admin}}, timedelta(minutes=5))
        return {"Authorization": f"Bearer {token}"}

    return make

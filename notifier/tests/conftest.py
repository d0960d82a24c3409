# notifier/tests/conftest.py
"""
Fixtures para pruebas con FastAPI + pytest-asyncio.
No se necesita Mongo ni FCM: el usuario y el proveedor push se sustituyen por fakes
en memoria, y la app se levanta con PUSH_PROVIDER=log y sin watcher.
"""
import os
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

# ---- entorno de test (debe setearse ANTES de importar notifier.main) ----
os.environ.setdefault("MONGO_DB", f"reports_test_{uuid.uuid4().hex[:8]}")
os.environ["PUSH_PROVIDER"] = "log"
os.environ["WATCH_REPORTS"] = "false"

from notifier.core.deps import current_dispatcher, current_push_sender  # noqa: E402
from notifier.main import app  # noqa: E402
from notifier.models.user import User  # noqa: E402
from notifier.services.dispatcher import NotificationDispatcher  # noqa: E402


# -------- Fakes --------
class FakeUsers:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.error: Exception | None = None
        self.calls: list[str] = []

    def add(self, user_id: str, fcm_token: str | None = None) -> User:
        user = User.model_validate({"_id": user_id, "fcmToken": fcm_token})
        self.users[user_id] = user
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        self.calls.append(user_id)
        if self.error:
            raise self.error
        return self.users.get(user_id)


class FakePush:
    def __init__(self) -> None:
        self.sent = []
        self.error: Exception | None = None

    async def send(self, payload) -> str:
        if self.error:
            raise self.error
        self.sent.append(payload)
        return f"projects/demo/messages/{len(self.sent)}"


@pytest.fixture
def fake_users() -> FakeUsers:
    return FakeUsers()

@pytest.fixture
def fake_push() -> FakePush:
    return FakePush()

@pytest.fixture
def dispatcher(fake_users, fake_push) -> NotificationDispatcher:
    return NotificationDispatcher(users=fake_users, push=fake_push)


@pytest_asyncio.fixture
async def async_client(dispatcher, fake_push):
    async with LifespanManager(app):
        app.dependency_overrides[current_dispatcher] = lambda: dispatcher
        app.dependency_overrides[current_push_sender] = lambda: fake_push
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    app.dependency_overrides.clear()

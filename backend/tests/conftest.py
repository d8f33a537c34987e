"""
Loop API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── fake_store:    In-memory DataStore with call recording
    ├── socket_client: Fake socket.io client (no network)
    ├── realtime:      RealtimeConnection opened over socket_client
    ├── app:           FastAPI app wired to fake_store and realtime
    ├── test_client:   HTTPX AsyncClient talking to the app over ASGI
    └── user / admin / role_admin: seeded identities with bearer headers
"""

import os
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

# Override settings for testing BEFORE any app imports
os.environ["SUPABASE_URL"] = "http://supabase.test"
os.environ["SUPABASE_ANON_KEY"] = "anon-test-key"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "service-test-key"
os.environ["REALTIME_URL"] = "http://realtime.test"
os.environ["REALTIME_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from socketio.exceptions import ConnectionError as SocketConnectionError

from loop_api.exceptions import BackendError
from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import (
    InventoryQuery,
    LoopInteractionQuery,
    ProfileChanges,
    QuestChanges,
    QuestDraft,
    QuestKey,
    QuestStatusChange,
    ReactionKey,
    ShopItemQuery,
    UserListQuery,
)
from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore, Row
from loop_api.services.supabase_store import PUBLIC_PROFILE_COLUMNS


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════


class FakeStore(DataStore):
    """
    In-memory DataStore.

    Tables are plain dicts/lists the tests seed directly. Every call is
    appended to `calls`; operation names listed in `fail_on` raise
    BackendError, and `provider_down` makes get_user fail the same way.
    """

    def __init__(self):
        self.tokens: Dict[str, Identity] = {}
        self.profiles: Dict[str, Row] = {}
        self.quests: Dict[str, Row] = {}
        self.inventory: List[Row] = []
        self.shop_items: List[Row] = []
        self.interactions: List[Row] = []
        self.reactions: Set[Tuple[str, str, str]] = set()
        self.bonus_users_count = 0
        self.healthy = True
        self.provider_down = False
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []
        self.closed = False

    @property
    def data_calls(self) -> List[str]:
        """Calls other than identity resolution."""
        return [call for call in self.calls if call != "get_user"]

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise BackendError(
                context={"operation": operation, "detail": "relation does not exist"}
            )

    async def get_user(self, token: str) -> Optional[Identity]:
        self.calls.append("get_user")
        if self.provider_down:
            raise BackendError(context={"operation": "get_user", "error": "ConnectError"})
        return self.tokens.get(token)

    async def fetch_profile(self, user_id: str, columns: Sequence[str] = ("*",)) -> Optional[Row]:
        self._record("fetch_profile")
        row = self.profiles.get(user_id)
        if row is None:
            return None
        if "*" in columns:
            return dict(row)
        return {column: row.get(column) for column in columns}

    async def update_profile(self, changes: ProfileChanges) -> Row:
        self._record("update_profile")
        if changes.user_id not in self.profiles:
            raise BackendError(context={"operation": "update_profile", "detail": "0 rows"})
        self.profiles[changes.user_id].update(changes.columns())
        return dict(self.profiles[changes.user_id])

    async def list_profiles(self, query: UserListQuery) -> List[Row]:
        self._record("list_profiles")
        rows = list(self.profiles.values())
        if query.order_column:
            rows.sort(key=lambda row: row.get(query.order_column) or 0, reverse=True)
        columns = PUBLIC_PROFILE_COLUMNS.split(",")
        return [{c: row.get(c) for c in columns} for row in rows[: query.limit]]

    async def update_quest_status(self, change: QuestStatusChange) -> Row:
        self._record("update_quest_status")
        if change.quest_id not in self.quests:
            raise BackendError(context={"operation": "update_quest_status", "detail": "0 rows"})
        self.quests[change.quest_id].update(
            {"is_active": change.is_active, "updated_at": change.updated_at}
        )
        return dict(self.quests[change.quest_id])

    async def create_quest(self, draft: QuestDraft) -> Row:
        self._record("create_quest")
        quest_id = f"quest-{len(self.quests) + 1}"
        self.quests[quest_id] = {
            **draft.model_dump(),
            "id": quest_id,
            "created_at": "2024-06-01T00:00:00+00:00",
            "updated_at": "2024-06-01T00:00:00+00:00",
        }
        return dict(self.quests[quest_id])

    async def update_quest(self, changes: QuestChanges) -> Row:
        self._record("update_quest")
        if changes.quest_id not in self.quests:
            raise BackendError(context={"operation": "update_quest", "detail": "0 rows"})
        self.quests[changes.quest_id].update(changes.columns())
        return dict(self.quests[changes.quest_id])

    async def delete_quest(self, key: QuestKey) -> None:
        self._record("delete_quest")
        self.quests.pop(key.quest_id, None)

    async def list_quests(self) -> List[Row]:
        self._record("list_quests")
        return sorted(
            (dict(q) for q in self.quests.values()),
            key=lambda q: q.get("created_at", ""),
            reverse=True,
        )

    async def distribute_weekly_bonus(self) -> int:
        self._record("distribute_weekly_bonus")
        return self.bonus_users_count

    async def list_inventory(self, query: InventoryQuery) -> List[Row]:
        self._record("list_inventory")
        rows = [r for r in self.inventory if r["user_id"] == query.user_id]
        if query.category:
            rows = [r for r in rows if r["shop_item"]["category"] == query.category]
        rows.sort(key=lambda r: r["purchased_at"], reverse=True)
        return rows[query.offset: query.offset + query.limit]

    async def list_shop_items(self, query: ShopItemQuery) -> List[Row]:
        self._record("list_shop_items")
        rows = [r for r in self.shop_items if r.get("is_active")]
        if query.category:
            rows = [r for r in rows if r["category"] == query.category]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return rows[query.offset: query.offset + query.limit]

    async def list_loop_interactions(self, query: LoopInteractionQuery) -> List[Row]:
        self._record("list_loop_interactions")
        return [
            {"loop_id": r["loop_id"], "interaction_type": r["interaction_type"]}
            for r in self.interactions
            if r["user_id"] == query.user_id and r["loop_id"] in query.loop_ids
        ]

    async def add_reaction(self, key: ReactionKey) -> None:
        self._record("add_reaction")
        self.reactions.add((key.message_id, key.user_id, key.emoji))

    async def remove_reaction(self, key: ReactionKey) -> None:
        self._record("remove_reaction")
        self.reactions.discard((key.message_id, key.user_id, key.emoji))

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


class FakeSocketClient:
    """
    Stand-in for socketio.AsyncClient.

    connect() fires the registered "connect" handler, disconnect() the
    "disconnect" handler; emitted events are collected in `emitted`.
    """

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.handlers: Dict[str, Any] = {}
        self.connected = False
        self.connect_calls: List[Tuple[str, Dict[str, Any]]] = []
        self.emitted: List[Tuple[str, Any]] = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def connect(self, url, **kwargs):
        self.connect_calls.append((url, kwargs))
        if not self.reachable:
            raise SocketConnectionError("Connection refused by the server")
        self.connected = True
        await self.handlers["connect"]()

    async def disconnect(self):
        self.connected = False
        await self.handlers["disconnect"]("client disconnect")

    async def emit(self, event, data=None, namespace=None, callback=None):
        self.emitted.append((event, data))


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def socket_client():
    return FakeSocketClient()


@pytest_asyncio.fixture
async def realtime(socket_client):
    """A RealtimeConnection opened over the fake socket client."""
    connection = RealtimeConnection("http://realtime.test", client=socket_client)
    await connection.open()
    yield connection
    await connection.close()


@pytest.fixture
def app(fake_store, realtime):
    from loop_api.main import create_app
    return create_app(store=fake_store, realtime=realtime)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _seed_identity(store: FakeStore, token: str, user_id: str, **profile: Any) -> Dict[str, str]:
    store.tokens[token] = Identity(id=user_id, email=f"{user_id}@loop.test")
    store.profiles[user_id] = {
        "id": user_id,
        "username": user_id,
        "display_name": user_id.title(),
        "avatar_url": None,
        "bio": None,
        "interests": [],
        "theme_data": None,
        "is_verified": False,
        "is_premium": False,
        "is_admin": False,
        "role": "user",
        "onboarding_completed": None,
        "follower_count": 0,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
        **profile,
    }
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(fake_store):
    """Bearer headers of an ordinary user (id "user-1")."""
    return _seed_identity(fake_store, "user-token", "user-1")


@pytest.fixture
def admin_headers(fake_store):
    """Bearer headers of a user with is_admin=True (role stays "user")."""
    return _seed_identity(fake_store, "admin-token", "admin-1", is_admin=True)


@pytest.fixture
def role_admin_headers(fake_store):
    """Bearer headers of a user with role="admin" (is_admin stays False)."""
    return _seed_identity(fake_store, "role-admin-token", "role-admin-1", role="admin")

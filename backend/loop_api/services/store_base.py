"""
Loop API — Abstract Data Store Interface
==========================================

What:  Abstract base class for everything this service asks of the hosted
       backend: identity resolution, table reads/updates and RPC calls.
Why:   Handlers depend on this interface, never on a concrete client. The
       application injects SupabaseStore; tests inject an in-memory fake.
How:   One coroutine per backend operation. Each takes a typed query struct
       from loop_api.schemas.queries, so the exact query shape of every
       endpoint is fixed by its signature.

Contract (all implementations):
    - Backend or transport failures raise BackendError; never a raw
      client exception.
    - get_user() returns None for a token the provider rejects.
    - Single-row updates that match no row raise BackendError.
    - No method retries.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

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

Row = Dict[str, Any]


class DataStore(ABC):
    """
    Abstract interface to the hosted relational backend.

    Implementations:
        - SupabaseStore: PostgREST + GoTrue over httpx (production)
        - FakeStore (tests/conftest.py): in-memory tables
    """

    # ── Identity ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_user(self, token: str) -> Optional[Identity]:
        """
        Exchange a bearer token for the identity it belongs to.

        Returns:
            Identity, or None when the provider rejects the token.
        Raises:
            BackendError: provider unreachable or answered unexpectedly.
        """
        ...

    # ── Profiles ──────────────────────────────────────────────────────────

    @abstractmethod
    async def fetch_profile(
        self, user_id: str, columns: Sequence[str] = ("*",)
    ) -> Optional[Row]:
        """Profile row for user_id restricted to columns, or None if absent."""
        ...

    @abstractmethod
    async def update_profile(self, changes: ProfileChanges) -> Row:
        """Write changes to one profile row and return the updated row."""
        ...

    @abstractmethod
    async def list_profiles(self, query: UserListQuery) -> List[Row]:
        """Public profile summaries ordered per query.sort."""
        ...

    # ── Quests ────────────────────────────────────────────────────────────

    @abstractmethod
    async def update_quest_status(self, change: QuestStatusChange) -> Row:
        """Set is_active/updated_at on one quest and return the updated row."""
        ...

    @abstractmethod
    async def list_quests(self) -> List[Row]:
        """All quests, newest first, with embedded quest_completions counts."""
        ...

    @abstractmethod
    async def create_quest(self, draft: QuestDraft) -> Row:
        """Insert one quest and return the stored row."""
        ...

    @abstractmethod
    async def update_quest(self, changes: QuestChanges) -> Row:
        """Write the set columns of one quest and return the updated row."""
        ...

    @abstractmethod
    async def delete_quest(self, key: QuestKey) -> None:
        """Delete one quest. Deleting an absent quest is not an error."""
        ...

    @abstractmethod
    async def distribute_weekly_bonus(self) -> int:
        """Run the weekly bonus procedure; returns the number of users credited."""
        ...

    # ── Shop & Inventory ──────────────────────────────────────────────────

    @abstractmethod
    async def list_inventory(self, query: InventoryQuery) -> List[Row]:
        ...

    @abstractmethod
    async def list_shop_items(self, query: ShopItemQuery) -> List[Row]:
        ...

    # ── Social ────────────────────────────────────────────────────────────

    @abstractmethod
    async def list_loop_interactions(self, query: LoopInteractionQuery) -> List[Row]:
        """Rows of (loop_id, interaction_type) for the caller and loop ids."""
        ...

    @abstractmethod
    async def add_reaction(self, key: ReactionKey) -> None:
        ...

    @abstractmethod
    async def remove_reaction(self, key: ReactionKey) -> None:
        ...

    # ── Lifecycle ─────────────────────────────────────────────────────────

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability probe; never raises."""
        ...

    async def close(self) -> None:
        """Release pooled connections. Called once at application shutdown."""
        return None

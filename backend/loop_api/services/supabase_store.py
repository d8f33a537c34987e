"""
Loop API — Supabase Data Store
================================

What:  Concrete DataStore talking to a hosted Supabase project over HTTP.
How:   One shared httpx.AsyncClient (connection pool) sends PostgREST
       requests under /rest/v1 and identity requests under /auth/v1. Each
       DataStore method translates its typed query struct into PostgREST
       filter, order and window parameters.
Who:   Created once by create_app(); closed by the lifespan on shutdown.

PostgREST conventions used here:
    column=eq.value          equality filter
    column=in.("a","b")      membership filter (values always quoted)
    order=column.desc        ordering
    limit / offset           pagination window
    Prefer: return=representation    updated rows in the response body
    Prefer: resolution=ignore-duplicates    insert-or-nothing on conflict

Error policy:
    Transport errors, non-2xx answers and unreadable bodies become
    BackendError. The backend's own text goes into the exception context
    for the server log and never reaches the client.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from loop_api.config import Settings
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
from loop_api.services.store_base import DataStore, Row

logger = logging.getLogger(__name__)

# Columns exposed by the public user listing
PUBLIC_PROFILE_COLUMNS = "id,username,display_name,avatar_url,is_verified,is_premium"

# How much of a backend error body is kept for the log
_DETAIL_LIMIT = 500


def quote_filter_value(value: str) -> str:
    """Quote a value for a PostgREST in.(...) list."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def in_filter(values: Iterable[str]) -> str:
    return "in.(" + ",".join(quote_filter_value(v) for v in values) + ")"


class SupabaseStore(DataStore):
    """
    DataStore backed by Supabase PostgREST and GoTrue.

    Every request carries the configured key as both `apikey` and bearer
    authorization, so table access runs with that key's privileges. Identity
    lookups replace the bearer header with the caller's own token.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "SupabaseStore":
        return cls(
            base_url=config.supabase_url,
            api_key=config.backend_api_key,
            timeout=config.backend_timeout,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Transport helpers
    # ══════════════════════════════════════════════════════════════════════

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send one request; transport failures become BackendError."""
        try:
            return await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            raise BackendError(
                context={
                    "operation": operation,
                    "error": type(exc).__name__,
                    "detail": str(exc),
                }
            ) from exc

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Like _send, but a non-2xx answer is also a BackendError."""
        response = await self._send(operation, method, path, **kwargs)
        if response.is_error:
            raise BackendError(
                context={
                    "operation": operation,
                    "status": response.status_code,
                    "detail": response.text[:_DETAIL_LIMIT],
                }
            )
        return response

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(
                context={"operation": operation, "detail": "response body is not JSON"}
            ) from exc

    async def _select(self, operation: str, table: str, params: Dict[str, str]) -> List[Row]:
        response = await self._request(operation, "GET", f"/rest/v1/{table}", params=params)
        rows = self._json(operation, response)
        if not isinstance(rows, list):
            raise BackendError(context={"operation": operation, "detail": "expected a row list"})
        return rows

    async def _update_one(
        self, operation: str, table: str, row_id: str, values: Dict[str, Any]
    ) -> Row:
        response = await self._request(
            operation,
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{row_id}", "select": "*"},
            json=values,
            headers={"Prefer": "return=representation"},
        )
        rows = self._json(operation, response)
        if not isinstance(rows, list) or len(rows) != 1:
            raise BackendError(
                context={
                    "operation": operation,
                    "row_id": row_id,
                    "detail": f"expected exactly one updated row, got {len(rows) if isinstance(rows, list) else rows!r}",
                }
            )
        return rows[0]

    # ══════════════════════════════════════════════════════════════════════
    # Identity
    # ══════════════════════════════════════════════════════════════════════

    async def get_user(self, token: str) -> Optional[Identity]:
        response = await self._send(
            "get_user",
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code in (401, 403, 404):
            return None
        if response.is_error:
            raise BackendError(
                context={
                    "operation": "get_user",
                    "status": response.status_code,
                    "detail": response.text[:_DETAIL_LIMIT],
                }
            )
        return Identity.from_provider(self._json("get_user", response))

    # ══════════════════════════════════════════════════════════════════════
    # Profiles
    # ══════════════════════════════════════════════════════════════════════

    async def fetch_profile(
        self, user_id: str, columns: Sequence[str] = ("*",)
    ) -> Optional[Row]:
        rows = await self._select(
            "fetch_profile",
            "profiles",
            {"select": ",".join(columns), "id": f"eq.{user_id}", "limit": "1"},
        )
        return rows[0] if rows else None

    async def update_profile(self, changes: ProfileChanges) -> Row:
        return await self._update_one(
            "update_profile", "profiles", changes.user_id, changes.columns()
        )

    async def list_profiles(self, query: UserListQuery) -> List[Row]:
        params = {"select": PUBLIC_PROFILE_COLUMNS}
        if query.order_column:
            params["order"] = f"{query.order_column}.desc"
        params["limit"] = str(query.limit)
        return await self._select("list_profiles", "profiles", params)

    # ══════════════════════════════════════════════════════════════════════
    # Quests
    # ══════════════════════════════════════════════════════════════════════

    async def update_quest_status(self, change: QuestStatusChange) -> Row:
        return await self._update_one(
            "update_quest_status",
            "quests",
            change.quest_id,
            {"is_active": change.is_active, "updated_at": change.updated_at},
        )

    async def list_quests(self) -> List[Row]:
        return await self._select(
            "list_quests",
            "quests",
            {"select": "*,quest_completions(count)", "order": "created_at.desc"},
        )

    async def create_quest(self, draft: QuestDraft) -> Row:
        response = await self._request(
            "create_quest",
            "POST",
            "/rest/v1/quests",
            params={"select": "*"},
            json=draft.model_dump(),
            headers={"Prefer": "return=representation"},
        )
        rows = self._json("create_quest", response)
        if not isinstance(rows, list) or len(rows) != 1:
            raise BackendError(
                context={"operation": "create_quest", "detail": "expected the inserted row"}
            )
        return rows[0]

    async def update_quest(self, changes: QuestChanges) -> Row:
        return await self._update_one(
            "update_quest", "quests", changes.quest_id, changes.columns()
        )

    async def delete_quest(self, key: QuestKey) -> None:
        await self._request(
            "delete_quest",
            "DELETE",
            "/rest/v1/quests",
            params={"id": f"eq.{key.quest_id}"},
            headers={"Prefer": "return=minimal"},
        )

    async def distribute_weekly_bonus(self) -> int:
        response = await self._request(
            "distribute_weekly_bonus", "POST", "/rest/v1/rpc/distribute_weekly_bonus", json={}
        )
        result = self._json("distribute_weekly_bonus", response)
        if isinstance(result, bool) or not isinstance(result, int):
            raise BackendError(
                context={
                    "operation": "distribute_weekly_bonus",
                    "detail": f"expected an integer user count, got {result!r}",
                }
            )
        return result

    # ══════════════════════════════════════════════════════════════════════
    # Shop & Inventory
    # ══════════════════════════════════════════════════════════════════════

    async def list_inventory(self, query: InventoryQuery) -> List[Row]:
        # !inner drops rows whose embedded item fails the category filter
        embed = "shop_item:shop_items!inner(*)" if query.category else "shop_item:shop_items(*)"
        params = {
            "select": f"*,{embed}",
            "user_id": f"eq.{query.user_id}",
            "order": "purchased_at.desc",
            "offset": str(query.offset),
            "limit": str(query.limit),
        }
        if query.category:
            params["shop_item.category"] = f"eq.{query.category}"
        return await self._select("list_inventory", "user_inventory", params)

    async def list_shop_items(self, query: ShopItemQuery) -> List[Row]:
        params = {
            "select": "*",
            "is_active": "eq.true",
            "order": "created_at.desc",
            "offset": str(query.offset),
            "limit": str(query.limit),
        }
        if query.category:
            params["category"] = f"eq.{query.category}"
        return await self._select("list_shop_items", "shop_items", params)

    # ══════════════════════════════════════════════════════════════════════
    # Social
    # ══════════════════════════════════════════════════════════════════════

    async def list_loop_interactions(self, query: LoopInteractionQuery) -> List[Row]:
        return await self._select(
            "list_loop_interactions",
            "loop_interactions",
            {
                "select": "loop_id,interaction_type",
                "user_id": f"eq.{query.user_id}",
                "loop_id": in_filter(query.loop_ids),
            },
        )

    async def add_reaction(self, key: ReactionKey) -> None:
        await self._request(
            "add_reaction",
            "POST",
            "/rest/v1/message_reactions",
            params={"on_conflict": "message_id,user_id,emoji"},
            json=key.model_dump(),
            headers={"Prefer": "resolution=ignore-duplicates,return=minimal"},
        )

    async def remove_reaction(self, key: ReactionKey) -> None:
        await self._request(
            "remove_reaction",
            "DELETE",
            "/rest/v1/message_reactions",
            params={
                "message_id": f"eq.{key.message_id}",
                "user_id": f"eq.{key.user_id}",
                "emoji": f"eq.{key.emoji}",
            },
            headers={"Prefer": "return=minimal"},
        )

    # ══════════════════════════════════════════════════════════════════════
    # Lifecycle
    # ══════════════════════════════════════════════════════════════════════

    async def health_check(self) -> bool:
        try:
            response = await self._client.get("/rest/v1/")
        except httpx.HTTPError as exc:
            logger.warning("Backend health probe failed: %s", type(exc).__name__)
            return False
        return not response.is_error

    async def close(self) -> None:
        await self._client.aclose()

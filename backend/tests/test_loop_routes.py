"""
Loop API — Loop Interaction Route Tests
=========================================

What we test:
    ✅ Absent, empty and comma-only loop_ids → [] with no backend query
    ✅ Interactions are scoped to the caller and the requested loops
"""

import pytest

from loop_api.validation import split_csv_param


@pytest.fixture
def interactions(fake_store, user_headers):
    fake_store.interactions = [
        {"user_id": "user-1", "loop_id": "loop-1", "interaction_type": "like"},
        {"user_id": "user-1", "loop_id": "loop-2", "interaction_type": "save"},
        {"user_id": "user-1", "loop_id": "loop-3", "interaction_type": "like"},
        {"user_id": "user-2", "loop_id": "loop-1", "interaction_type": "save"},
    ]


class TestLoopInteractions:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "?loop_ids=", "?loop_ids=,,", "?loop_ids=%20,%20"])
    async def test_no_ids_no_query(self, test_client, fake_store, user_headers, query):
        response = await test_client.get(f"/api/loop-interactions{query}", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "interactions": []}
        assert fake_store.data_calls == []

    @pytest.mark.asyncio
    async def test_returns_callers_interactions(self, test_client, interactions, user_headers):
        response = await test_client.get(
            "/api/loop-interactions?loop_ids=loop-1,loop-2,loop-9", headers=user_headers
        )

        assert response.status_code == 200
        assert response.json()["interactions"] == [
            {"loop_id": "loop-1", "interaction_type": "like"},
            {"loop_id": "loop-2", "interaction_type": "save"},
        ]


class TestSplitCsvParam:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, []),
            ("", []),
            (",,", []),
            ("a", ["a"]),
            (" a , ,b ", ["a", "b"]),
        ],
    )
    def test_split(self, raw, expected):
        assert split_csv_param(raw) == expected

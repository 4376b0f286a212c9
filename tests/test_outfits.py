"""
Tests for Outfit Service

Unit tests for outfit history ordering and ownership scoping.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime, timezone

from glamora.services.outfit_service import OutfitService


def _outfit_doc(outfit_id, created_at, worn_date=None):
    return {
        "outfit_id": outfit_id,
        "user_id": "user_a",
        "outfit_name": outfit_id,
        "outfit_items": [],
        "created_at": created_at,
        "worn_date": worn_date,
    }


class TestOutfitService:
    @pytest.fixture
    def service(self):
        return OutfitService()

    @pytest.mark.asyncio
    async def test_history_sorted_by_worn_then_created(self, service):
        docs = [
            _outfit_doc("old_but_worn", datetime(2024, 1, 1, tzinfo=timezone.utc),
                        worn_date=datetime(2024, 3, 10, tzinfo=timezone.utc)),
            _outfit_doc("new", datetime(2024, 3, 5, tzinfo=timezone.utc)),
        ]
        with patch('glamora.services.outfit_service.get_db') as mock_db:
            cursor = MagicMock()
            cursor.to_list = AsyncMock(return_value=docs)
            mock_db.return_value.outfits.aggregate = MagicMock(return_value=cursor)

            outfits = await service.list_outfits("user_a")

            pipeline = mock_db.return_value.outfits.aggregate.call_args[0][0]

        assert [o.outfit_id for o in outfits] == ["old_but_worn", "new"]
        assert pipeline[0] == {"$match": {"user_id": "user_a"}}
        assert pipeline[1] == {
            "$addFields": {"history_date": {"$ifNull": ["$worn_date", "$created_at"]}}
        }
        assert pipeline[2] == {"$sort": {"history_date": -1}}
        assert pipeline[-1]["$project"]["_id"] == 0

    @pytest.mark.asyncio
    async def test_limit_applies_after_sort(self, service):
        # only the newest rows survive the limit, whatever the insertion order
        with patch('glamora.services.outfit_service.get_db') as mock_db:
            cursor = MagicMock()
            cursor.to_list = AsyncMock(return_value=[])
            mock_db.return_value.outfits.aggregate = MagicMock(return_value=cursor)

            await service.list_outfits("user_a", limit=200)

            pipeline = mock_db.return_value.outfits.aggregate.call_args[0][0]

        stages = [next(iter(stage)) for stage in pipeline]
        assert stages.index("$sort") < stages.index("$limit")
        assert pipeline[stages.index("$limit")] == {"$limit": 200}
        cursor.to_list.assert_awaited_once_with(length=200)
        mock_db.return_value.outfits.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_lookups_are_scoped_to_owner(self, service):
        with patch('glamora.services.outfit_service.get_db') as mock_db:
            mock_db.return_value.outfits.find_one = AsyncMock(return_value=None)

            assert await service.get_outfit("user_b", "outfit_1") is None

        assert mock_db.return_value.outfits.find_one.call_args[0][0] == {
            "outfit_id": "outfit_1",
            "user_id": "user_b",
        }

    @pytest.mark.asyncio
    async def test_toggle_favorite(self, service):
        doc = _outfit_doc("outfit_1", datetime(2024, 3, 1, tzinfo=timezone.utc))
        doc["is_favorite"] = True

        with patch('glamora.services.outfit_service.get_db') as mock_db:
            mock_db.return_value.outfits.find_one_and_update = AsyncMock(return_value=doc)

            outfit = await service.toggle_favorite("user_a", "outfit_1")

            update = mock_db.return_value.outfits.find_one_and_update.call_args[0][1]

        assert outfit.is_favorite is True
        assert update == [{"$set": {"is_favorite": {"$not": ["$is_favorite"]}}}]

    @pytest.mark.asyncio
    async def test_delete_foreign_outfit(self, service):
        with patch('glamora.services.outfit_service.get_db') as mock_db:
            mock_db.return_value.outfits.delete_one = AsyncMock(
                return_value=MagicMock(deleted_count=0)
            )

            assert await service.delete_outfit("user_b", "outfit_1") is False

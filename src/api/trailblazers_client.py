import asyncio
from datetime import datetime
from typing import Any

from better_proxy import Proxy
from pydantic import TypeAdapter, ValidationError

from src.api.base_client import BaseAPIClient
from src.exceptions.custom_exceptions import MalformedResponseError
from src.models import DerivedUserRank, HistoryItem, TrailblazersUserRank
from src.utils import calculate_daily_points


_HISTORY_ADAPTER = TypeAdapter(list[HistoryItem])


class TrailblazersClient(BaseAPIClient):
    """Client for the Taiko Trailblazers leaderboard API."""

    def __init__(
        self,
        base_url: str,
        max_daily_points: int,
        proxy: Proxy | None = None
    ) -> None:
        super().__init__(base_url, proxy)
        self.max_daily_points = max_daily_points

    @staticmethod
    def parse_user_rank(payload: Any) -> TrailblazersUserRank:
        try:
            return TrailblazersUserRank.model_validate(payload)
        except ValidationError as error:
            raise MalformedResponseError(
                f"Invalid user rank response: {error.error_count()} errors", payload
            ) from error

    @staticmethod
    def parse_user_history(payload: Any) -> list[HistoryItem]:
        items = payload.get("items") if isinstance(payload, dict) else payload
        try:
            return _HISTORY_ADAPTER.validate_python(items)
        except ValidationError as error:
            raise MalformedResponseError(
                f"Invalid user history response: {error.error_count()} errors", payload
            ) from error

    async def get_user_rank(self, address: str) -> TrailblazersUserRank:
        payload = await self.send_request(
            "GET", method="user/rank", params={"address": address}
        )
        return self.parse_user_rank(payload)

    async def get_user_history(self, address: str) -> list[HistoryItem]:
        payload = await self.send_request(
            "GET", method="user/history", params={"address": address}
        )
        return self.parse_user_history(payload)

    async def get_derived_user_rank(
        self,
        address: str,
        now: datetime | None = None
    ) -> DerivedUserRank:
        rank, history = await asyncio.gather(
            self.get_user_rank(address),
            self.get_user_history(address),
        )
        daily_points = calculate_daily_points(history, now)
        return DerivedUserRank(
            **rank.model_dump(),
            daily_points_earned=daily_points,
            is_max_daily_points_earned=daily_points >= self.max_daily_points,
        )

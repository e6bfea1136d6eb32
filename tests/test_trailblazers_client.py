from datetime import datetime, timezone

import pytest

from src.api import TrailblazersClient
from src.api.base_client import BaseAPIClient
from src.exceptions import (
    HttpStatusError,
    MalformedResponseError,
    ServerError,
    SessionRateLimited,
)
from src.models import HistoryItem, TrailblazersUserRank

ADDRESS = "0xAA00000000000000000000000000000000001111"
NOW = datetime(2024, 10, 2, 15, 30, tzinfo=timezone.utc)
DAY_START = int(datetime(2024, 10, 2, tzinfo=timezone.utc).timestamp())

RANK_PAYLOAD = {
    "rank": 1204,
    "address": ADDRESS,
    "score": 10.5,
    "multiplier": 1.5,
    "totalScore": 2_530_000.75,
    "total": 984_331,
    "blacklisted": False,
}


@pytest.fixture
def client() -> TrailblazersClient:
    return TrailblazersClient("https://trailblazer.example", max_daily_points=74_000)


def test_parse_user_rank():
    rank = TrailblazersClient.parse_user_rank(RANK_PAYLOAD)

    assert rank.rank == 1204
    assert rank.total_score == 2_530_000.75
    assert rank.blacklisted is False


def test_parse_user_rank_missing_field():
    payload = {key: value for key, value in RANK_PAYLOAD.items() if key != "multiplier"}

    with pytest.raises(MalformedResponseError) as exc_info:
        TrailblazersClient.parse_user_rank(payload)

    assert exc_info.value.response_data == payload


def test_parse_user_rank_rejects_non_boolean_blacklisted():
    with pytest.raises(MalformedResponseError):
        TrailblazersClient.parse_user_rank({**RANK_PAYLOAD, "blacklisted": "no"})


@pytest.mark.parametrize("payload", [
    [{"points": 1000, "date": DAY_START}],
    {"items": [{"points": 1000, "date": DAY_START}]},
])
def test_parse_user_history(payload):
    history = TrailblazersClient.parse_user_history(payload)

    assert history == [HistoryItem(points=1000, date=DAY_START)]


@pytest.mark.parametrize("payload", [
    None,
    {"items": None},
    [{"points": "many", "date": DAY_START}],
    [{"points": 1000}],
])
def test_parse_user_history_malformed(payload):
    with pytest.raises(MalformedResponseError):
        TrailblazersClient.parse_user_history(payload)


@pytest.mark.parametrize("status, error_type", [
    (429, SessionRateLimited),
    (500, ServerError),
    (503, ServerError),
    (404, HttpStatusError),
    (400, HttpStatusError),
])
def test_verify_status_raises(status, error_type):
    with pytest.raises(error_type):
        BaseAPIClient._verify_status(status, "")


def test_verify_status_accepts_success():
    BaseAPIClient._verify_status(200, "{}")


def test_http_status_error_keeps_status_code():
    with pytest.raises(HttpStatusError) as exc_info:
        BaseAPIClient._verify_status(403, "denied")

    assert exc_info.value.status_code == 403
    assert exc_info.value.response_data == "denied"


async def test_derived_user_rank_counts_today_only(client, monkeypatch):
    history = [
        HistoryItem(points=1000, date=DAY_START + 60),
        HistoryItem(points=2500, date=DAY_START + 3600),
        HistoryItem(points=9000, date=DAY_START - 1),
    ]

    async def get_user_rank(address):
        return TrailblazersUserRank.model_validate(RANK_PAYLOAD)

    async def get_user_history(address):
        return history

    monkeypatch.setattr(client, "get_user_rank", get_user_rank)
    monkeypatch.setattr(client, "get_user_history", get_user_history)

    derived = await client.get_derived_user_rank(ADDRESS, now=NOW)

    assert derived.daily_points_earned == 3500
    assert derived.is_max_daily_points_earned is False
    assert derived.rank == 1204
    assert derived.total_score == 2_530_000.75


async def test_derived_user_rank_reaches_daily_limit(client, monkeypatch):
    async def get_user_rank(address):
        return TrailblazersUserRank.model_validate(RANK_PAYLOAD)

    async def get_user_history(address):
        return [HistoryItem(points=74_000, date=DAY_START)]

    monkeypatch.setattr(client, "get_user_rank", get_user_rank)
    monkeypatch.setattr(client, "get_user_history", get_user_history)

    derived = await client.get_derived_user_rank(ADDRESS, now=NOW)

    assert derived.is_max_daily_points_earned is True

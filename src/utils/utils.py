import asyncio
import math
import random
from datetime import datetime, timezone
from typing import Iterable

from config.settings import NOTE_MAX_LENGTH, SHORT_ADDRESS_HEAD, SHORT_ADDRESS_TAIL
from src.logger import AsyncLogger
from src.models import HistoryItem


async def random_sleep(
    address: str | None = None,
    min_sec: float = 30,
    max_sec: float = 60
) -> None:
    logger = AsyncLogger()
    delay = random.uniform(min_sec, max_sec)

    minutes, seconds = divmod(delay, 60)
    template = (
        f"Sleep "
        f"{int(minutes)} minutes {seconds:.1f} seconds" if minutes > 0 else
        f"Sleep {seconds:.1f} seconds"
    )
    await logger.logger_msg(template, type_msg="debug", address=address)

    try:
        await asyncio.sleep(delay)
    except asyncio.CancelledError:
        await logger.logger_msg(
            "Sleep interrupted", type_msg="warning", address=address
        )
        raise


def shorten_address(
    address: str,
    head: int = SHORT_ADDRESS_HEAD,
    tail: int = SHORT_ADDRESS_TAIL
) -> str:
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:]}"


def truncate_string(value: str, max_length: int = NOTE_MAX_LENGTH) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + "..."


def format_display_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def start_of_utc_day(now: datetime | None = None) -> datetime:
    now = now or datetime.now(tz=timezone.utc)
    return now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def calculate_daily_points(
    history: Iterable[HistoryItem],
    now: datetime | None = None
) -> float:
    """Sum of points earned since 00:00 UTC of the current day."""
    day_start = start_of_utc_day(now).timestamp()
    return sum(item.points for item in history if item.date >= day_start)


def calculate_number_of_votes(
    daily_points_limit: int,
    daily_points_earned: float,
    points_per_vote: int
) -> int:
    remaining = max(0, daily_points_limit - daily_points_earned)
    return math.ceil(remaining / points_per_vote)

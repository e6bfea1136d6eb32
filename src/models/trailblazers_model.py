from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class TrailblazersUserRank(BaseModel):
    rank: int
    address: str
    score: float
    multiplier: float
    total_score: float = Field(alias="totalScore")
    total: int
    blacklisted: StrictBool

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class HistoryItem(BaseModel):
    points: float
    date: int

    model_config = ConfigDict(frozen=True)

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.date, tz=timezone.utc)


class DerivedUserRank(TrailblazersUserRank):
    daily_points_earned: float = 0
    is_max_daily_points_earned: bool = False

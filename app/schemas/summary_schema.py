# app/schemas/summary_schema.py

from pydantic import BaseModel
from typing import Dict, List


class DaySummary(BaseModel):
    date: str  # "YYYY-MM-DD"
    feeds: int
    diapers: int
    sleep_hours: float


class ActivityTotals(BaseModel):
    feeds: int
    diapers: int
    sleep_hours: float


class DailyAverages(BaseModel):
    feeds: float
    diapers: float
    sleep_hours: float


class ActivitySummary(BaseModel):
    baby_id: int
    days: List[DaySummary]
    feed_types: Dict[str, int]
    totals: ActivityTotals
    daily_averages: DailyAverages
    today: DaySummary

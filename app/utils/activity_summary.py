# app/utils/activity_summary.py

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.models.event_model import Event
from app.utils.time_utils import utcnow


def _empty_day(day: date) -> dict:
    return {"date": day.isoformat(), "feeds": 0, "diapers": 0, "sleep_hours": 0.0}


def generate_activity_summary(db: Session, baby_id: int, days: int = 7, today: Optional[date] = None):
    """
    Resumo dos últimos `days` dias (em UTC, hoje incluso) para um bebê:
    - por dia: mamadas, fraldas e horas de sono
    - tipos de mamada (details.feedType, "unknown" quando ausente)
    - totais do período e média diária (totais / days)
    """
    today = today or utcnow().date()
    first_day = today - timedelta(days=days - 1)
    period_start = datetime.combine(first_day, datetime.min.time())
    period_end = datetime.combine(today + timedelta(days=1), datetime.min.time())

    events = (
        db.query(Event)
        .filter(
            Event.baby_id == baby_id,
            Event.timestamp >= period_start,
            Event.timestamp < period_end,
        )
        .order_by(Event.timestamp)
        .all()
    )

    per_day = {first_day + timedelta(days=i): _empty_day(first_day + timedelta(days=i)) for i in range(days)}
    sleep_minutes = Counter()
    feed_types = Counter()
    last_sleep_start = None

    for event in events:
        day = event.timestamp.date()
        if event.type == "feed":
            per_day[day]["feeds"] += 1
            feed_types[(event.details or {}).get("feedType") or "unknown"] += 1
        elif event.type == "diaper":
            per_day[day]["diapers"] += 1
        elif event.type == "sleep" and event.end_time is not None:
            if event.end_time > event.timestamp:
                sleep_minutes[day] += (event.end_time - event.timestamp).total_seconds() / 60
        elif event.type == "sleep_start":
            last_sleep_start = event.timestamp
        elif event.type == "sleep_end" and last_sleep_start:
            # soneca conta no dia em que começou
            sleep_minutes[last_sleep_start.date()] += (event.timestamp - last_sleep_start).total_seconds() / 60
            last_sleep_start = None

    for day, minutes in sleep_minutes.items():
        if day in per_day:
            per_day[day]["sleep_hours"] = round(minutes / 60, 1)

    daily = [per_day[day] for day in sorted(per_day)]
    totals = {
        "feeds": sum(d["feeds"] for d in daily),
        "diapers": sum(d["diapers"] for d in daily),
        "sleep_hours": round(sum(d["sleep_hours"] for d in daily), 1),
    }
    averages = {key: round(value / days, 1) for key, value in totals.items()}

    return {
        "baby_id": baby_id,
        "days": daily,
        "feed_types": dict(feed_types),
        "totals": totals,
        "daily_averages": averages,
        "today": daily[-1],
    }

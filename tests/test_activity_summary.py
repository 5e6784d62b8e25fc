"""Resumo de atividades: contagens por dia, sono, tipos de mamada e médias."""

from datetime import date, datetime

from app.models.auth_models import User
from app.models.baby_model import Baby
from app.models.event_model import Event
from app.utils.activity_summary import generate_activity_summary

TODAY = date(2025, 3, 10)


def _baby(db):
    user = User(email="mae@example.com", password_hash="x")
    db.add(user)
    db.flush()
    baby = Baby(user_id=user.id, name="Alice", birth_date=date(2025, 1, 1), gender="female")
    db.add(baby)
    db.flush()
    return user, baby


def test_empty_period(db) -> None:
    _, baby = _baby(db)
    summary = generate_activity_summary(db, baby.id, days=3, today=TODAY)
    assert [d["date"] for d in summary["days"]] == ["2025-03-08", "2025-03-09", "2025-03-10"]
    assert summary["totals"] == {"feeds": 0, "diapers": 0, "sleep_hours": 0.0}
    assert summary["feed_types"] == {}


def test_counts_sleep_pairs_and_feed_types(db) -> None:
    user, baby = _baby(db)

    def ev(kind, ts, **kwargs):
        return Event(user_id=user.id, baby_id=baby.id, type=kind, timestamp=ts, **kwargs)

    db.add_all([
        ev("feed", datetime(2025, 3, 10, 6, 0), details={"feedType": "breast"}),
        ev("feed", datetime(2025, 3, 10, 9, 0), details={"feedType": "breast"}),
        ev("feed", datetime(2025, 3, 9, 9, 0), details={"feedType": "bottle"}),
        ev("diaper", datetime(2025, 3, 9, 10, 0)),
        # começa num dia e termina no outro: conta no dia do início
        ev("sleep_start", datetime(2025, 3, 9, 23, 0)),
        ev("sleep_end", datetime(2025, 3, 10, 1, 0)),
        ev("sleep", datetime(2025, 3, 10, 13, 0), end_time=datetime(2025, 3, 10, 13, 48)),
        # sem fim: não soma sono
        ev("sleep", datetime(2025, 3, 10, 15, 0)),
        # fora do período
        ev("feed", datetime(2025, 3, 1, 9, 0)),
        ev("growth", datetime(2025, 3, 10, 8, 0), details={"weight_grams": 4200}),
    ])
    db.commit()

    summary = generate_activity_summary(db, baby.id, days=7, today=TODAY)

    assert summary["today"] == {"date": "2025-03-10", "feeds": 2, "diapers": 0, "sleep_hours": 0.8}
    assert summary["days"][-2] == {"date": "2025-03-09", "feeds": 1, "diapers": 1, "sleep_hours": 2.0}
    assert summary["feed_types"] == {"breast": 2, "bottle": 1}
    assert summary["totals"] == {"feeds": 3, "diapers": 1, "sleep_hours": 2.8}
    assert summary["daily_averages"] == {"feeds": 0.4, "diapers": 0.1, "sleep_hours": 0.4}


def test_other_babies_are_ignored(db) -> None:
    user, baby = _baby(db)
    sibling = Baby(user_id=user.id, name="Bento", birth_date=date(2025, 1, 1), gender="male")
    db.add(sibling)
    db.flush()
    db.add(Event(user_id=user.id, baby_id=sibling.id, type="feed", timestamp=datetime(2025, 3, 10, 6, 0)))
    db.commit()

    assert generate_activity_summary(db, baby.id, today=TODAY)["totals"]["feeds"] == 0

"""Agendador: tick isolado por agenda, janela de repetição, carga do banco e loop."""

import asyncio
import threading
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from sqlalchemy.exc import OperationalError

from app.models.auth_models import User
from app.models.baby_model import Baby
from app.models.event_model import Event
from app.models.notification_schedule_model import NotificationSchedule
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.reminder_errors import DataUnavailable
from app.services.reminder_scheduler import ReminderScheduler
from app.utils.quiet_hours import INTERVAL
from app.utils.reminder_evaluator import ReminderSchedule

UTC = timezone.utc
NOON = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


def _scheduler(**kwargs):
    received = []
    dispatcher = NotificationDispatcher()
    dispatcher.subscribe(received.append)
    scheduler = ReminderScheduler(dispatcher=dispatcher, zone=UTC, **kwargs)
    return scheduler, received


def test_tick_dispatches_for_every_overdue_schedule() -> None:
    scheduler, received = _scheduler()
    for baby_id in (1, 2):
        scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=baby_id, enabled=True))
        scheduler.state.update_activity(1, baby_id, "feed", at=NOON - timedelta(hours=4))

    fired = scheduler.tick(NOON)
    assert sorted(i.baby_id for i in fired) == [1, 2]
    assert received == fired


def test_invalid_schedule_does_not_stop_the_tick(caplog) -> None:
    scheduler, received = _scheduler()
    scheduler.state.update_schedule(
        ReminderSchedule(user_id=1, baby_id=1, feeding_interval_minutes=0, enabled=True)
    )
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=2, enabled=True))
    scheduler.state.update_activity(1, 1, "feed", at=NOON - timedelta(hours=4))
    scheduler.state.update_activity(1, 2, "feed", at=NOON - timedelta(hours=4))

    fired = scheduler.tick(NOON)
    assert [i.baby_id for i in fired] == [2]
    assert "agenda inválida" in caplog.text


def test_unexpected_error_is_contained(monkeypatch) -> None:
    scheduler, received = _scheduler()
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=1, enabled=True))
    scheduler.state.update_activity(1, 1, "feed", at=NOON - timedelta(hours=4))

    def broken(*args, **kwargs):
        raise RuntimeError("inesperado")

    monkeypatch.setattr("app.services.reminder_scheduler.evaluate_schedule", broken)
    assert scheduler.tick(NOON) == []


def test_repeats_every_tick_by_default() -> None:
    scheduler, received = _scheduler()
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=1, enabled=True))
    scheduler.state.update_activity(1, 1, "diaper", at=NOON - timedelta(hours=3))

    scheduler.tick(NOON)
    scheduler.tick(NOON + timedelta(minutes=5))
    assert [i.activity_type for i in received] == ["diaper", "diaper"]


def test_min_refire_window() -> None:
    scheduler, received = _scheduler(min_refire_minutes=30)
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=1, enabled=True))
    scheduler.state.update_activity(1, 1, "diaper", at=NOON - timedelta(hours=3))

    scheduler.tick(NOON)
    scheduler.tick(NOON + timedelta(minutes=5))
    scheduler.tick(NOON + timedelta(minutes=30))
    assert len(received) == 2


def test_new_activity_stops_reminders() -> None:
    scheduler, received = _scheduler()
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=1, enabled=True))
    scheduler.state.update_activity(1, 1, "feed", at=NOON - timedelta(hours=4))
    assert scheduler.tick(NOON)

    scheduler.state.update_activity(1, 1, "feed", at=NOON)
    assert scheduler.tick(NOON + timedelta(minutes=5)) == []


def _seed(db):
    user = User(email="pai@example.com", password_hash="x")
    db.add(user)
    db.flush()
    baby = Baby(user_id=user.id, name="Bento", birth_date=date(2025, 1, 1), gender="male")
    db.add(baby)
    db.flush()
    return user, baby


def test_hydrate_loads_schedules_and_latest_marks(db) -> None:
    user, baby = _seed(db)
    db.add(NotificationSchedule(user_id=user.id, baby_id=baby.id, enabled=True))
    db.add_all([
        Event(user_id=user.id, baby_id=baby.id, type="feed", timestamp=datetime(2025, 3, 10, 6, 0)),
        Event(user_id=user.id, baby_id=baby.id, type="feed", timestamp=datetime(2025, 3, 10, 8, 0)),
        Event(user_id=user.id, baby_id=baby.id, type="sleep_start", timestamp=datetime(2025, 3, 10, 7, 0)),
        Event(user_id=user.id, baby_id=baby.id, type="sleep_end", timestamp=datetime(2025, 3, 10, 8, 30)),
        Event(user_id=user.id, baby_id=baby.id, type="growth", timestamp=datetime(2025, 3, 10, 9, 0)),
    ])
    db.commit()

    scheduler, received = _scheduler()
    assert scheduler.hydrate(db) == 1

    marks = scheduler.state.get_marks(user.id, baby.id)
    assert marks.last_feed == datetime(2025, 3, 10, 8, 0, tzinfo=UTC)
    assert marks.last_sleep == datetime(2025, 3, 10, 8, 30, tzinfo=UTC)
    assert marks.last_diaper is None

    fired = scheduler.tick(NOON)
    assert [i.activity_type for i in fired] == ["feed", "sleep"]


def test_hydrate_skips_invalid_rows(db) -> None:
    user, baby = _seed(db)
    db.add(NotificationSchedule(user_id=user.id, baby_id=baby.id, quiet_start_hour=30))
    db.commit()

    scheduler, _ = _scheduler()
    assert scheduler.hydrate(db) == 0
    assert len(scheduler.state) == 0


def test_hydrate_wraps_database_errors() -> None:
    broken = MagicMock()
    broken.query.side_effect = OperationalError("SELECT", {}, Exception("banco fora do ar"))
    scheduler, _ = _scheduler()
    with pytest.raises(DataUnavailable):
        scheduler.hydrate(broken)


def test_start_and_stop() -> None:
    app = FastAPI()
    scheduler, received = _scheduler(interval_seconds=0.01, quiet_policy=INTERVAL)
    # início == fim: sem janela de silêncio, qualquer que seja a hora da máquina
    scheduler.state.update_schedule(
        ReminderSchedule(user_id=1, baby_id=1, quiet_start_hour=0, quiet_end_hour=0, enabled=True)
    )
    scheduler.state.update_activity(1, 1, "feed", at=datetime.now(UTC) - timedelta(days=1))

    async def run():
        scheduler.start(app)
        assert scheduler.start(app) is app.state.reminder_task
        assert scheduler.running
        await asyncio.sleep(0.05)
        await scheduler.stop(app)

    asyncio.run(run())
    assert received
    assert not scheduler.running
    assert app.state.reminder_task is None
    assert len(scheduler.state) == 0


def test_min_refire_window_holds_across_threads() -> None:
    scheduler, received = _scheduler(min_refire_minutes=60)
    scheduler.state.update_schedule(ReminderSchedule(user_id=1, baby_id=1, enabled=True))
    scheduler.state.update_activity(1, 1, "feed", at=NOON - timedelta(hours=4))

    barrier = threading.Barrier(8)

    def run():
        barrier.wait()
        scheduler.tick(NOON)

    threads = [threading.Thread(target=run) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert [i.activity_type for i in received] == ["feed"]

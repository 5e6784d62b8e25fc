# app/services/reminder_scheduler.py

import asyncio
import logging
import threading
from datetime import datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.event_model import Event
from app.models.notification_schedule_model import NotificationSchedule
from app.services.notification_dispatcher import NotificationDispatcher, ReminderInbox, log_listener
from app.services.reminder_errors import DataUnavailable, InvalidSchedule
from app.services.reminder_state import ReminderState
from app.services.schedule_store import row_to_schedule
from app.utils.quiet_hours import LEGACY
from app.utils.reminder_evaluator import ReminderIntent, evaluate_schedule
from app.utils.time_utils import as_utc, get_zone, utcnow
from config import settings

logger = logging.getLogger(__name__)

# tipos de evento que atualizam a última atividade
MARK_FOR_EVENT_TYPE = {
    "feed": "feed",
    "diaper": "diaper",
    "sleep": "sleep",
    "sleep_start": "sleep",
    "sleep_end": "sleep",
}


class ReminderScheduler:
    """
    Único avaliador periódico dos lembretes.

    A cada tick avalia todas as agendas do estado em memória (sem I/O) e
    entrega os lembretes pelo dispatcher. Falha de uma agenda não impede
    as demais.
    """

    def __init__(
        self,
        state: Optional[ReminderState] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        interval_seconds: float = 300,
        quiet_policy: str = LEGACY,
        min_refire_minutes: int = 0,
        zone: Optional[tzinfo] = None,
        inbox: Optional[ReminderInbox] = None,
    ):
        self.state = state or ReminderState()
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.inbox = inbox
        if inbox is not None:
            self.dispatcher.subscribe(inbox)
        self.interval_seconds = float(interval_seconds)
        self.quiet_policy = quiet_policy
        self.min_refire_minutes = int(min_refire_minutes)
        self.zone = zone
        self._task: Optional[asyncio.Task] = None
        # (user_id, baby_id, tipo) -> último disparo, só usado com min_refire_minutes > 0
        self._last_fired: Dict[Tuple[int, int, str], datetime] = {}
        self._fired_lock = threading.Lock()

    # ------------------ tick ------------------

    def tick(self, now: Optional[datetime] = None) -> List[ReminderIntent]:
        now = as_utc(now) if now is not None else utcnow()
        fired: List[ReminderIntent] = []

        for schedule, marks in self.state.snapshot():
            try:
                intents = evaluate_schedule(
                    schedule, marks, now, quiet_policy=self.quiet_policy, zone=self.zone
                )
            except InvalidSchedule as exc:
                logger.warning("agenda inválida ignorada: %s", exc)
                continue
            except DataUnavailable as exc:
                logger.warning("dados indisponíveis para %s: %s", schedule.key, exc)
                continue
            except Exception:
                logger.exception("erro ao avaliar agenda %s", schedule.key)
                continue

            for intent in intents:
                if not self._should_fire(intent, now):
                    continue
                self.dispatcher.dispatch(intent)
                fired.append(intent)

        if fired:
            logger.info("tick: %d lembrete(s) disparado(s)", len(fired))
        return fired

    def _should_fire(self, intent: ReminderIntent, now: datetime) -> bool:
        if self.min_refire_minutes <= 0:
            return True
        key = (intent.user_id, intent.baby_id, intent.activity_type)
        with self._fired_lock:
            last = self._last_fired.get(key)
            if last is not None and now - last < timedelta(minutes=self.min_refire_minutes):
                return False
            self._last_fired[key] = now
        return True

    # ------------------ carga inicial ------------------

    def hydrate(self, db: Session) -> int:
        """Carrega agendas e últimas atividades do banco para o estado."""
        try:
            rows = db.query(NotificationSchedule).all()
            latest = (
                db.query(Event.user_id, Event.baby_id, Event.type, func.max(Event.timestamp))
                .filter(Event.type.in_(tuple(MARK_FOR_EVENT_TYPE)))
                .group_by(Event.user_id, Event.baby_id, Event.type)
                .all()
            )
        except SQLAlchemyError as exc:
            raise DataUnavailable(f"falha ao ler agendas do banco: {exc}") from exc

        loaded = 0
        for row in rows:
            try:
                self.state.update_schedule(row_to_schedule(row))
                loaded += 1
            except InvalidSchedule as exc:
                logger.warning("agenda inválida no banco ignorada: %s", exc)

        newest: Dict[Tuple[int, int, str], datetime] = {}
        for user_id, baby_id, event_type, last_at in latest:
            if last_at is None:
                continue
            key = (user_id, baby_id, MARK_FOR_EVENT_TYPE[event_type])
            last_at = as_utc(last_at)
            if key not in newest or last_at > newest[key]:
                newest[key] = last_at
        for (user_id, baby_id, activity_type), last_at in newest.items():
            self.state.update_activity(user_id, baby_id, activity_type, at=last_at)

        logger.info("lembretes carregados: %d agenda(s), %d marca(s)", loaded, len(newest))
        return loaded

    # ------------------ loop periódico ------------------

    async def _run_forever(self) -> None:
        # primeiro tick só depois de um intervalo, como o setInterval do app web
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.tick()
            except Exception:  # noqa: BLE001
                logger.exception("tick de lembretes falhou")

    def start(self, app: FastAPI) -> asyncio.Task:
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self._run_forever(), name="reminder-scheduler")
        app.state.reminder_task = self._task
        logger.info("agendador de lembretes iniciado (intervalo %ss)", self.interval_seconds)
        return self._task

    async def stop(self, app: FastAPI) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        app.state.reminder_task = None
        self.state.clear_all()
        with self._fired_lock:
            self._last_fired.clear()
        logger.info("agendador de lembretes parado")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


def build_reminder_scheduler() -> ReminderScheduler:
    """Agendador com as configurações do ambiente, logando e guardando na caixa de entrada."""
    dispatcher = NotificationDispatcher()
    dispatcher.subscribe(log_listener)
    return ReminderScheduler(
        dispatcher=dispatcher,
        interval_seconds=settings.REMINDER_CHECK_INTERVAL_SECONDS,
        quiet_policy=settings.REMINDER_QUIET_HOURS_POLICY,
        min_refire_minutes=settings.REMINDER_MIN_REFIRE_MINUTES,
        zone=get_zone(settings.REMINDER_TIMEZONE),
        inbox=ReminderInbox(max_size=settings.REMINDER_INBOX_SIZE),
    )

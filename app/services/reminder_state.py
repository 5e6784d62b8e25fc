# app/services/reminder_state.py

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from app.utils.reminder_evaluator import (
    ACTIVITY_TYPES,
    ActivityMarks,
    ReminderSchedule,
    schedule_key,
)
from app.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class ReminderState:
    """
    Cache local das agendas e das últimas atividades de cada bebê.

    Chaveado por "{user_id}_{baby_id}". As rotas (threadpool) escrevem e o
    agendador lê uma cópia a cada tick, por isso tudo passa pelo lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._schedules: Dict[str, ReminderSchedule] = {}
        self._marks: Dict[str, ActivityMarks] = {}

    def update_schedule(self, schedule: ReminderSchedule) -> None:
        with self._lock:
            self._schedules[schedule.key] = schedule
        logger.debug("agenda atualizada: %s enabled=%s", schedule.key, schedule.enabled)

    def remove_schedule(self, user_id, baby_id) -> None:
        with self._lock:
            self._schedules.pop(schedule_key(user_id, baby_id), None)

    def get_schedule(self, user_id, baby_id) -> Optional[ReminderSchedule]:
        with self._lock:
            return self._schedules.get(schedule_key(user_id, baby_id))

    def update_activity(self, user_id, baby_id, activity_type: str, at: Optional[datetime] = None) -> None:
        if activity_type not in ACTIVITY_TYPES:
            raise ValueError(f"tipo de atividade desconhecido: {activity_type!r}")

        stamp = as_utc(at) if at is not None else utcnow()
        key = schedule_key(user_id, baby_id)
        with self._lock:
            current = self._marks.get(key, ActivityMarks())
            self._marks[key] = replace(current, **{f"last_{activity_type}": stamp})

    def get_marks(self, user_id, baby_id) -> Optional[ActivityMarks]:
        with self._lock:
            marks = self._marks.get(schedule_key(user_id, baby_id))
            return replace(marks) if marks is not None else None

    def remove_baby(self, baby_id) -> None:
        suffix = f"_{baby_id}"
        with self._lock:
            for store in (self._schedules, self._marks):
                for key in [k for k in store if k.endswith(suffix)]:
                    del store[key]

    def clear_all(self) -> None:
        with self._lock:
            self._schedules = {}
            self._marks = {}
        logger.info("estado dos lembretes limpo")

    def snapshot(self) -> List[Tuple[ReminderSchedule, Optional[ActivityMarks]]]:
        with self._lock:
            return [
                (schedule, replace(self._marks[key]) if key in self._marks else None)
                for key, schedule in self._schedules.items()
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._schedules)

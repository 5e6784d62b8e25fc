# app/utils/reminder_evaluator.py

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Dict, List, Optional

from app.services.reminder_errors import InvalidSchedule
from app.utils.quiet_hours import LEGACY, POLICIES, is_quiet
from app.utils.time_utils import as_utc, local_hour

FEED = "feed"
DIAPER = "diaper"
SLEEP = "sleep"
ACTIVITY_TYPES = (FEED, DIAPER, SLEEP)

# sugere dormir depois de 3h acordado (fixo, não configurável)
SLEEP_REMINDER_HOURS = 3

MESSAGES = {
    FEED: ("Feeding Reminder", "It might be time for the next feeding"),
    DIAPER: ("Diaper Check Reminder", "Time to check the diaper"),
    SLEEP: ("Sleep Reminder", "Your baby might be getting tired"),
}


@dataclass(frozen=True)
class ReminderSchedule:
    user_id: int
    baby_id: int
    feeding_interval_minutes: int = 180
    diaper_check_interval_minutes: int = 120
    sleep_reminder_enabled: bool = True
    quiet_start_hour: int = 22
    quiet_end_hour: int = 7
    enabled: bool = False

    @property
    def key(self) -> str:
        return schedule_key(self.user_id, self.baby_id)


@dataclass
class ActivityMarks:
    last_feed: Optional[datetime] = None
    last_diaper: Optional[datetime] = None
    last_sleep: Optional[datetime] = None


@dataclass(frozen=True)
class ReminderIntent:
    activity_type: str
    user_id: int
    baby_id: int
    title: str
    body: str

    def to_payload(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "body": self.body,
            "babyId": self.baby_id,
            "activityType": self.activity_type,
        }


def schedule_key(user_id, baby_id) -> str:
    return f"{user_id}_{baby_id}"


def build_intent(schedule: ReminderSchedule, activity_type: str) -> ReminderIntent:
    title, body = MESSAGES[activity_type]
    return ReminderIntent(
        activity_type=activity_type,
        user_id=schedule.user_id,
        baby_id=schedule.baby_id,
        title=title,
        body=body,
    )


def validate_schedule(schedule: ReminderSchedule) -> None:
    """Levanta InvalidSchedule para intervalos <= 0 ou horas fora de 0..23."""
    for name in ("feeding_interval_minutes", "diaper_check_interval_minutes"):
        value = getattr(schedule, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidSchedule(f"{name} inválido: {value!r} (agenda {schedule.key})")
    for name in ("quiet_start_hour", "quiet_end_hour"):
        value = getattr(schedule, name)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 23:
            raise InvalidSchedule(f"{name} inválido: {value!r} (agenda {schedule.key})")


def _minutes_between(now: datetime, then: datetime) -> float:
    return (as_utc(now) - as_utc(then)).total_seconds() / 60


def evaluate_schedule(
    schedule: ReminderSchedule,
    marks: Optional[ActivityMarks],
    now: datetime,
    quiet_policy: str = LEGACY,
    zone: Optional[tzinfo] = None,
) -> List[ReminderIntent]:
    """
    Decide quais lembretes disparar agora para uma agenda.

    Função pura: não altera agenda nem marcas e não guarda memória do que
    já foi enviado. Sem marca para um tipo, aquele tipo nunca dispara.
    A ordem do resultado é sempre feed, diaper, sleep.
    """
    if not schedule.enabled:
        return []

    validate_schedule(schedule)
    if quiet_policy not in POLICIES:
        raise ValueError(f"política de horário de silêncio desconhecida: {quiet_policy!r}")

    current_hour = local_hour(now, zone)
    if is_quiet(current_hour, schedule.quiet_start_hour, schedule.quiet_end_hour, quiet_policy):
        return []

    marks = marks or ActivityMarks()
    intents: List[ReminderIntent] = []

    if marks.last_feed is not None:
        if _minutes_between(now, marks.last_feed) >= schedule.feeding_interval_minutes:
            intents.append(build_intent(schedule, FEED))

    if marks.last_diaper is not None:
        if _minutes_between(now, marks.last_diaper) >= schedule.diaper_check_interval_minutes:
            intents.append(build_intent(schedule, DIAPER))

    if schedule.sleep_reminder_enabled and marks.last_sleep is not None:
        hours_since_sleep = _minutes_between(now, marks.last_sleep) / 60
        if hours_since_sleep >= SLEEP_REMINDER_HOURS:
            intents.append(build_intent(schedule, SLEEP))

    return intents

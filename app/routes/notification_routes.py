from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.models.auth_models import User
from app.routes.baby_routes import get_owned_baby
from app.schemas.notification_schema import (
    NotificationScheduleIn,
    NotificationScheduleOut,
    QuietHours,
    ReminderOut,
)
from app.services import schedule_store
from app.services.reminder_scheduler import ReminderScheduler
from app.utils.quiet_hours import parse_hour
from app.utils.reminder_evaluator import ReminderSchedule
from app.dependencies.auth import get_current_user
from app.dependencies.reminders import get_reminder_scheduler
from config.database import get_db

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_out(schedule: ReminderSchedule) -> NotificationScheduleOut:
    return NotificationScheduleOut(
        baby_id=schedule.baby_id,
        feeding_interval_minutes=schedule.feeding_interval_minutes,
        diaper_check_interval_minutes=schedule.diaper_check_interval_minutes,
        sleep_reminder_enabled=schedule.sleep_reminder_enabled,
        quiet_hours=QuietHours(
            start=f"{schedule.quiet_start_hour:02d}:00",
            end=f"{schedule.quiet_end_hour:02d}:00",
        ),
        enabled=schedule.enabled,
    )


@router.put("/schedules/{baby_id}", response_model=NotificationScheduleOut)
def save_schedule(
    baby_id: int,
    data: NotificationScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    get_owned_baby(db, baby_id, current_user)

    schedule = ReminderSchedule(
        user_id=current_user.id,
        baby_id=baby_id,
        feeding_interval_minutes=data.feeding_interval_minutes,
        diaper_check_interval_minutes=data.diaper_check_interval_minutes,
        sleep_reminder_enabled=data.sleep_reminder_enabled,
        quiet_start_hour=parse_hour(data.quiet_hours.start),
        quiet_end_hour=parse_hour(data.quiet_hours.end),
        enabled=data.enabled,
    )
    # mesmo se o banco falhar a agenda fica valendo no cache local
    schedule_store.save_schedule(db, scheduler.state, schedule)
    return _to_out(schedule)


@router.get("/schedules/{baby_id}", response_model=NotificationScheduleOut)
def load_schedule(
    baby_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    get_owned_baby(db, baby_id, current_user)

    schedule = schedule_store.load_schedule(db, scheduler.state, current_user.id, baby_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Agenda de lembretes não encontrada.")
    return _to_out(schedule)


@router.delete("/schedules/{baby_id}")
def delete_schedule(
    baby_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    get_owned_baby(db, baby_id, current_user)

    if not schedule_store.delete_schedule(db, scheduler.state, current_user.id, baby_id):
        raise HTTPException(status_code=404, detail="Agenda de lembretes não encontrada.")
    return {"msg": "Agenda de lembretes removida."}


@router.get("/inbox", response_model=List[ReminderOut])
def read_inbox(
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Devolve e limpa os lembretes pendentes do usuário."""
    if scheduler.inbox is None:
        return []
    return scheduler.inbox.drain(current_user.id)


@router.post("/check", response_model=List[ReminderOut])
def run_check(
    current_user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Roda um tick agora e devolve só os lembretes do usuário logado."""
    intents = scheduler.tick()
    return [i.to_payload() for i in intents if i.user_id == current_user.id]

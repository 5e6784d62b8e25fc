# app/services/schedule_store.py

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.notification_schedule_model import NotificationSchedule
from app.services.reminder_state import ReminderState
from app.utils.reminder_evaluator import ReminderSchedule, validate_schedule

logger = logging.getLogger(__name__)


def row_to_schedule(row: NotificationSchedule) -> ReminderSchedule:
    schedule = ReminderSchedule(
        user_id=row.user_id,
        baby_id=row.baby_id,
        feeding_interval_minutes=row.feeding_interval_minutes,
        diaper_check_interval_minutes=row.diaper_check_interval_minutes,
        sleep_reminder_enabled=bool(row.sleep_reminder_enabled),
        quiet_start_hour=row.quiet_start_hour,
        quiet_end_hour=row.quiet_end_hour,
        enabled=bool(row.enabled),
    )
    validate_schedule(schedule)
    return schedule


def save_schedule(db: Session, state: ReminderState, schedule: ReminderSchedule) -> bool:
    """
    Grava primeiro no cache local e depois no banco (upsert por user_id + baby_id).

    Retorna False se só o cache foi atualizado; a agenda continua valendo
    para o agendador até a próxima gravação.
    """
    validate_schedule(schedule)
    state.update_schedule(schedule)

    try:
        row = (
            db.query(NotificationSchedule)
            .filter_by(user_id=schedule.user_id, baby_id=schedule.baby_id)
            .first()
        )
        if row is None:
            row = NotificationSchedule(user_id=schedule.user_id, baby_id=schedule.baby_id)
            db.add(row)

        row.feeding_interval_minutes = schedule.feeding_interval_minutes
        row.diaper_check_interval_minutes = schedule.diaper_check_interval_minutes
        row.sleep_reminder_enabled = schedule.sleep_reminder_enabled
        row.quiet_start_hour = schedule.quiet_start_hour
        row.quiet_end_hour = schedule.quiet_end_hour
        row.enabled = schedule.enabled

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("erro ao salvar agenda %s no banco; mantida só no cache", schedule.key)
        return False
    return True


def load_schedule(db: Session, state: ReminderState, user_id: int, baby_id: int) -> Optional[ReminderSchedule]:
    """Banco primeiro; se não houver linha ou o banco falhar, usa o cache local."""
    try:
        row = db.query(NotificationSchedule).filter_by(user_id=user_id, baby_id=baby_id).first()
    except SQLAlchemyError:
        logger.exception("erro ao carregar agenda %s_%s; usando cache", user_id, baby_id)
        return state.get_schedule(user_id, baby_id)

    if row is not None:
        return row_to_schedule(row)
    return state.get_schedule(user_id, baby_id)


def delete_schedule(db: Session, state: ReminderState, user_id: int, baby_id: int) -> bool:
    """Remove do cache e do banco; se o banco falhar, vale o que havia no cache."""
    cached = state.get_schedule(user_id, baby_id) is not None
    state.remove_schedule(user_id, baby_id)
    try:
        deleted = (
            db.query(NotificationSchedule)
            .filter_by(user_id=user_id, baby_id=baby_id)
            .delete()
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("erro ao remover agenda %s_%s do banco", user_id, baby_id)
        return cached
    return bool(deleted) or cached

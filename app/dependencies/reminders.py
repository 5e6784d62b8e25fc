from fastapi import Request

from app.services.reminder_scheduler import ReminderScheduler


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    return request.app.state.reminder_scheduler

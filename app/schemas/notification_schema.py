# app/schemas/notification_schema.py

from pydantic import BaseModel, Field

HOUR_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class QuietHours(BaseModel):
    start: str = Field("22:00", pattern=HOUR_PATTERN)
    end: str = Field("07:00", pattern=HOUR_PATTERN)


class NotificationScheduleIn(BaseModel):
    feeding_interval_minutes: int = Field(180, gt=0)        # 3 horas
    diaper_check_interval_minutes: int = Field(120, gt=0)   # 2 horas
    sleep_reminder_enabled: bool = True
    quiet_hours: QuietHours = Field(default_factory=QuietHours)
    enabled: bool = False


class NotificationScheduleOut(NotificationScheduleIn):
    baby_id: int


class ReminderOut(BaseModel):
    title: str
    body: str
    babyId: int
    activityType: str

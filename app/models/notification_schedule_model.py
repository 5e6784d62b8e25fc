# app/models/notification_schedule_model.py

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from config.database import Base


class NotificationSchedule(Base):
    __tablename__ = "notification_schedules"
    __table_args__ = (UniqueConstraint("user_id", "baby_id", name="uq_schedule_user_baby"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    baby_id = Column(Integer, ForeignKey("babies.id", ondelete="CASCADE"), nullable=False)

    feeding_interval_minutes = Column(Integer, nullable=False, default=180)
    diaper_check_interval_minutes = Column(Integer, nullable=False, default=120)
    sleep_reminder_enabled = Column(Boolean, nullable=False, default=True)

    # horário de silêncio (só a hora é usada)
    quiet_start_hour = Column(Integer, nullable=False, default=22)
    quiet_end_hour = Column(Integer, nullable=False, default=7)

    enabled = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    baby = relationship("Baby", back_populates="notification_schedules")

# app/schemas/event_schema.py

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Any, Dict, Optional

from app.models.event_model import EVENT_TYPES
from app.utils.time_utils import to_naive_utc


def _check_type(value):
    if value is not None and value not in EVENT_TYPES:
        raise ValueError(f"tipo deve ser um de: {', '.join(EVENT_TYPES)}")
    return value


class EventCreate(BaseModel):
    baby_id: int
    type: str
    timestamp: datetime
    end_time: Optional[datetime] = None
    notes: str = ""
    details: Dict[str, Any] = {}

    @field_validator("type")
    @classmethod
    def check_type(cls, value):
        return _check_type(value)

    @field_validator("timestamp", "end_time")
    @classmethod
    def store_as_utc(cls, value):
        return to_naive_utc(value)


class EventUpdate(BaseModel):
    type: str | None = None
    timestamp: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None
    details: Dict[str, Any] | None = None

    @field_validator("type")
    @classmethod
    def check_type(cls, value):
        return _check_type(value)

    @field_validator("timestamp", "end_time")
    @classmethod
    def store_as_utc(cls, value):
        return to_naive_utc(value)

class EventRead(BaseModel):
    id: int
    baby_id: int
    type: str
    timestamp: datetime
    end_time: Optional[datetime] = None
    notes: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True

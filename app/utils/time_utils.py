# app/utils/time_utils.py

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Datas sem fuso (como vêm do banco) são tratadas como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(name: Optional[str]) -> Optional[tzinfo]:
    return ZoneInfo(name) if name else None


def local_hour(now: datetime, zone: Optional[tzinfo] = None) -> int:
    # astimezone(None) converte para o fuso local do processo
    return as_utc(now).astimezone(zone).hour


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Converte para UTC e tira o fuso; as colunas DateTime guardam UTC sem fuso."""
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)

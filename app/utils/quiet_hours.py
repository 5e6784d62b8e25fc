# app/utils/quiet_hours.py

LEGACY = "legacy"
INTERVAL = "interval"
POLICIES = (LEGACY, INTERVAL)


def parse_hour(value: str) -> int:
    """'22:00' -> 22. Só a hora importa para o horário de silêncio."""
    return int(str(value).split(":")[0])


def is_quiet_hour_legacy(current_hour: int, start_hour: int, end_hour: int) -> bool:
    """
    Comparação herdada do app web: silencia quando
    current_hour >= start OU current_hour < end.

    Funciona para janelas que viram a noite (22 -> 7). Para janelas no
    mesmo dia (ex.: 13 -> 15) silencia quase o dia inteiro.
    """
    return current_hour >= start_hour or current_hour < end_hour


def is_within_quiet_hours(current_hour: int, start_hour: int, end_hour: int) -> bool:
    """
    Contenção explícita no intervalo [start, end).
    start < end: janela no mesmo dia; start > end: atravessa a meia-noite;
    start == end: sem janela de silêncio.
    """
    if start_hour == end_hour:
        return False
    if start_hour < end_hour:
        return start_hour <= current_hour < end_hour
    return current_hour >= start_hour or current_hour < end_hour


def is_quiet(current_hour: int, start_hour: int, end_hour: int, policy: str = LEGACY) -> bool:
    if policy == INTERVAL:
        return is_within_quiet_hours(current_hour, start_hour, end_hour)
    if policy == LEGACY:
        return is_quiet_hour_legacy(current_hour, start_hour, end_hour)
    raise ValueError(f"política de horário de silêncio desconhecida: {policy!r}")

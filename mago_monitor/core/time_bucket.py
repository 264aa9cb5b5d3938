"""Cálculo da última hora completa.

A hora corrente só é considerada completa no minuto 0. Entre 00:01 e 00:59
a última hora completa é 23h do dia anterior.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def to_local(now: datetime, timezone: Optional[str] = DEFAULT_TIMEZONE) -> datetime:
    """Converte ``now`` para o fuso do dashboard. Valores naive já são locais."""
    if now.tzinfo is None or timezone is None:
        return now
    return now.astimezone(ZoneInfo(timezone))


def last_complete_bucket(now: datetime, timezone: Optional[str] = DEFAULT_TIMEZONE) -> Tuple[date, int]:
    """Retorna (dia, hora) da última hora completa em relação a ``now``."""
    local = to_local(now, timezone)
    if local.minute == 0:
        return local.date(), local.hour
    anterior = local.replace(minute=0, second=0, microsecond=0) - timedelta(hours=1)
    return anterior.date(), anterior.hour


def last_complete_hour(now: datetime, timezone: Optional[str] = DEFAULT_TIMEZONE) -> int:
    """Retorna a última hora completa (0-23)."""
    return last_complete_bucket(now, timezone)[1]


__all__ = ["DEFAULT_TIMEZONE", "to_local", "last_complete_bucket", "last_complete_hour"]

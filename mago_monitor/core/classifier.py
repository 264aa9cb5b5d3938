"""Classificação de registros entre série real (Empacotamento) e previsão.

A decisão usa apenas a semântica do rótulo. As duas séries ocupam a mesma
faixa numérica, então a magnitude do valor nunca participa.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from mago_monitor.core.models import SeriesKind
from mago_monitor.utils.helpers import normalize_ascii_lower

FORECAST_TOKENS: Tuple[str, ...] = ("previsao", "estimativa")
ACTUAL_TOKENS: Tuple[str, ...] = ("empacotamento",)


def _contem(texto: str, tokens: Iterable[str]) -> bool:
    return any(token in texto for token in tokens)


def classify(tag: str | None) -> SeriesKind:
    """Classifica o rótulo (case e acento insensitive).

    Previsão tem precedência: ``"PREVISAO-EMPACOTAMENTO"`` é FORECAST.
    """
    texto = normalize_ascii_lower(tag)
    if not texto:
        return SeriesKind.UNKNOWN
    if _contem(texto, FORECAST_TOKENS):
        return SeriesKind.FORECAST
    if _contem(texto, ACTUAL_TOKENS):
        return SeriesKind.ACTUAL
    return SeriesKind.UNKNOWN


__all__ = ["FORECAST_TOKENS", "ACTUAL_TOKENS", "classify"]

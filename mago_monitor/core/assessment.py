"""Classificação do valor de Empacotamento nas faixas PUT/CALL."""

from __future__ import annotations

from typing import Dict, Optional

from mago_monitor.core.models import Assessment, ThresholdSet
from mago_monitor.utils.helpers import formatar_numero_br
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("assessment")

CRITICO_PUT = "Crítico PUT"
ALERTA_PUT = "Alerta PUT"
NEUTRO = "Neutro"
ALERTA_CALL = "Alerta CALL"
CRITICO_CALL = "Crítico CALL"

SEVERITY_EMOJI: Dict[str, str] = {
    "critical": "🔴",
    "warning": "🟡",
    "neutral": "🟢",
}

SEVERITY_COLOR: Dict[str, str] = {
    "critical": "#dc3545",
    "warning": "#ffc107",
    "neutral": "#28a745",
}


def assess_condition(value: float, thresholds: Optional[ThresholdSet] = None) -> Assessment:
    """Classifica ``value`` contra os limites.

    Faixas (limites inclusivos como no painel):
        value >= critico_put                  -> Crítico PUT
        alerta_put <= value < critico_put     -> Alerta PUT
        alerta_call < value < alerta_put      -> Neutro
        critico_call <= value <= alerta_call  -> Alerta CALL
        value < critico_call                  -> Crítico CALL
    """
    limites = thresholds or ThresholdSet()
    if not limites.ordenado():
        logger.warning("Limites fora de ordem (critico_put > alerta_put > alerta_call > critico_call): %s", limites)

    texto = formatar_numero_br(value)

    if value >= limites.critico_put:
        status, severity, message = CRITICO_PUT, "critical", f"Valor crítico PUT: {texto}"
    elif value >= limites.alerta_put:
        status, severity, message = ALERTA_PUT, "warning", f"Alerta PUT: {texto}"
    elif value > limites.alerta_call:
        status, severity, message = NEUTRO, "neutral", f"Valor neutro: {texto}"
    elif value >= limites.critico_call:
        status, severity, message = ALERTA_CALL, "warning", f"Alerta CALL: {texto}"
    else:
        status, severity, message = CRITICO_CALL, "critical", f"Valor crítico CALL: {texto}"

    return Assessment(status=status, severity=severity, message=message, value=value)


def severity_emoji(severity: str) -> str:
    return SEVERITY_EMOJI.get(severity, "⚪")


def severity_color(severity: str) -> str:
    return SEVERITY_COLOR.get(severity, "#6c757d")


__all__ = [
    "CRITICO_PUT",
    "ALERTA_PUT",
    "NEUTRO",
    "ALERTA_CALL",
    "CRITICO_CALL",
    "assess_condition",
    "severity_emoji",
    "severity_color",
]

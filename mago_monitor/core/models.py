"""Estruturas de dados do monitor (registros candidatos, limites e avaliação)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SeriesKind(Enum):
    """Série à qual um registro pertence."""
    ACTUAL = "actual"
    FORECAST = "forecast"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CandidateRecord:
    """Leitura candidata extraída do payload.

    ``timestamp`` é sempre timezone-aware (UTC); ``hour`` é a hora local do
    dashboard, usada na seleção da última hora completa.
    """
    tag: str
    timestamp: datetime
    hour: int
    value: float
    quality: Optional[bool] = None
    series_kind: SeriesKind = SeriesKind.UNKNOWN


@dataclass(frozen=True)
class ThresholdSet:
    """Limites de classificação (critico_put > alerta_put > alerta_call > critico_call)."""
    critico_put: float = 70_500_000
    alerta_put: float = 68_500_000
    alerta_call: float = 66_500_000
    critico_call: float = 64_000_000

    def ordenado(self) -> bool:
        return self.critico_put > self.alerta_put > self.alerta_call > self.critico_call


@dataclass(frozen=True)
class Assessment:
    """Resultado da classificação do valor."""
    status: str
    severity: str
    message: str
    value: float


@dataclass(frozen=True)
class SelectionResult:
    """Registro escolhido pelo seletor."""
    record: CandidateRecord
    used_fallback: bool = False

    @property
    def value(self) -> float:
        return self.record.value


@dataclass(frozen=True)
class ExtractionResult:
    """Saída de ``extract_value``."""
    value: float
    hour: int
    timestamp: datetime
    tag: str
    target_hour: int
    used_fallback: bool = False
    total_candidates: int = 0


__all__ = [
    "SeriesKind",
    "CandidateRecord",
    "ThresholdSet",
    "Assessment",
    "SelectionResult",
    "ExtractionResult",
]

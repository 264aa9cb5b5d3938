"""Exceções do monitor MAGO TAG.

Apenas ParseFailure e NoActualSeriesFound atravessam a fronteira da
extração; erros de linha/item são descartados dentro do parser.
"""

from __future__ import annotations

from typing import Optional


class MonitorError(Exception):
    """Erro base do monitor."""


class ExtractionError(MonitorError):
    """Falha fatal na extração do valor."""


class ParseFailure(ExtractionError):
    """Payload sem nenhuma linha utilizável."""

    def __init__(self, message: str = "Nenhum registro válido encontrado no payload", formato: Optional[str] = None):
        super().__init__(message)
        self.formato = formato


class NoActualSeriesFound(ExtractionError):
    """Existem registros, mas nenhum da série Empacotamento."""

    def __init__(self, message: str = "Nenhum registro da série Empacotamento encontrado", total_candidatos: int = 0):
        super().__init__(message)
        self.total_candidatos = total_candidatos


class ConfigError(MonitorError):
    """Configuração ausente ou inválida."""


class FetchError(MonitorError):
    """Falha ao obter o payload do dashboard."""


class NotificationError(MonitorError):
    """Falha no envio do e-mail."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}


__all__ = [
    "MonitorError",
    "ExtractionError",
    "ParseFailure",
    "NoActualSeriesFound",
    "ConfigError",
    "FetchError",
    "NotificationError",
]

"""Utilitários compartilhados do monitor."""

from .helpers import (
    format_duration,
    print_section,
    generate_timestamp,
    normalize_ascii_lower,
    normalizar_decimal,
    formatar_numero_br,
)
from .logger_config import get_logger, setup_logging

__all__ = [
    "format_duration",
    "print_section",
    "generate_timestamp",
    "normalize_ascii_lower",
    "normalizar_decimal",
    "formatar_numero_br",
    "get_logger",
    "setup_logging",
]

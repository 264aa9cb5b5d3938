"""Funções auxiliares reutilizáveis do monitor.

Consolida funções de:
- console (format_duration, print_section, generate_timestamp)
- normalização de texto e números no padrão brasileiro
"""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from numbers import Number
from typing import Any, Optional, Sequence

import pandas as pd


# =============================================================================
# FUNÇÕES DE FORMATAÇÃO DE CONSOLE
# =============================================================================

BORDER = "=" * 60


def format_duration(seconds: float, *, precision: int = 1) -> str:
    """Formata durações: ``12.3s``, ``2m 5s`` ou ``1h 3m``."""
    if seconds < 60:
        return f"{seconds:.{precision}f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"


def print_section(
    title: str,
    lines: Sequence[str],
    *,
    leading_break: bool = True,
    trailing_break: bool = True,
) -> None:
    """Imprime um bloco padronizado com borda e corpo."""
    if leading_break:
        print()

    print(BORDER)
    print(title)
    print(BORDER)
    print()

    for line in lines:
        if line:
            print(line)
        else:
            print()

    if trailing_break:
        print()


def generate_timestamp() -> str:
    """Gera timestamp padronizado do projeto (YYYYMMDD_HHMMSS)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


# =============================================================================
# FUNÇÕES DE NORMALIZAÇÃO
# =============================================================================

_THOUSANDS_ONLY_RE = re.compile(r"-?\d{1,3}(?:\.\d{3})+")


def normalize_ascii_lower(text: str | None) -> str:
    """Normaliza texto removendo acentos e espacos extras para comparacoes."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFKD", str(text))
    without_accents = ''.join(ch for ch in normalized if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", without_accents).strip().lower()


def normalizar_decimal(valor: Any) -> Optional[float]:
    """Converte valores em formato brasileiro (ponto de milhar, vírgula decimal) em float.

    ``"66.445.145"`` vira 66445145.0 e ``"66.445.145,5"`` vira 66445145.5.
    Um único ponto seguido de três dígitos também é tratado como milhar.
    """
    if valor is None or isinstance(valor, bool):
        return None

    if isinstance(valor, Number):
        if pd.isna(valor):
            return None
        try:
            return float(valor)
        except (TypeError, ValueError):
            return None

    texto = str(valor).strip()
    if not texto or texto.lower() in {"nan", "none", "null", "-"}:
        return None

    texto = (
        texto.replace("\u00A0", "")
        .replace("\u202F", "")
        .replace(" ", "")
        .replace("\t", "")
        .replace('"', "")
    )

    if "," in texto:
        texto = texto.replace(".", "").replace(",", ".")
    elif _THOUSANDS_ONLY_RE.fullmatch(texto):
        texto = texto.replace(".", "")

    texto = re.sub(r"[^0-9\.\-eE+]", "", texto)
    if not texto or texto in {".", "-", "-.", ".-", "--"}:
        return None

    try:
        numero = float(texto)
    except ValueError:
        return None
    if pd.isna(numero):
        return None
    return numero


def formatar_numero_br(valor: float, casas: int = 3) -> str:
    """Formata número no padrão pt-BR (``66.500.000`` ou ``1.234,5``)."""
    if float(valor).is_integer():
        return f"{int(valor):,}".replace(",", ".")
    texto = f"{valor:,.{casas}f}".rstrip("0").rstrip(".")
    return texto.replace(",", "_").replace(".", ",").replace("_", ".")


__all__ = [
    "BORDER",
    "format_duration",
    "print_section",
    "generate_timestamp",
    "normalize_ascii_lower",
    "normalizar_decimal",
    "formatar_numero_br",
]

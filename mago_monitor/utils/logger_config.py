"""Configuração de logging do monitor.

Todos os loggers do projeto ficam sob o logger raiz ``mago_monitor``.
``setup_logging`` anexa os handlers de console e arquivo uma única vez;
sem ele, as mensagens apenas propagam para o logging padrão.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Mapping, Optional

ROOT_LOGGER_NAME = "mago_monitor"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_CONSOLE_FORMAT = "%(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured_files: Dict[str, Path] = {}


def setup_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """Configura handlers de console e arquivo (idempotente).

    Args:
        log_dir: Diretório dos arquivos de log (``None`` = apenas console)
        level: Nível do handler de console

    Returns:
        Logger raiz do projeto
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    if not any(getattr(h, "_mago_console", False) for h in root.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        console._mago_console = True  # type: ignore[attr-defined]
        root.addHandler(console)

    if log_dir is not None:
        log_dir = Path(log_dir)
        chave = str(log_dir.resolve())
        if chave not in _configured_files:
            log_dir.mkdir(parents=True, exist_ok=True)
            arquivo = log_dir / f"monitor_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(arquivo, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
            root.addHandler(file_handler)
            _configured_files[chave] = arquivo

    return root


def get_logger(name: str) -> logging.Logger:
    """Retorna logger filho de ``mago_monitor``."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_session_start(nome: str) -> None:
    """Registra início de uma sessão/etapa."""
    logger = get_logger("sessao")
    logger.info("=" * 60)
    logger.info("INÍCIO: %s | %s", nome, datetime.now().strftime("%d/%m/%Y %H:%M:%S"))
    logger.info("=" * 60)


def log_session_end(nome: str, success: bool = True) -> None:
    """Registra fim de uma sessão/etapa."""
    logger = get_logger("sessao")
    status = "SUCESSO" if success else "FALHA"
    if success:
        logger.info("FIM: %s | %s", nome, status)
    else:
        logger.error("FIM: %s | %s", nome, status)


def log_metrics(nome: str, metricas: Mapping[str, object]) -> None:
    """Registra métricas chave/valor de uma etapa."""
    logger = get_logger("metricas")
    logger.info("[%s]", nome)
    for chave, valor in metricas.items():
        logger.info("  %s: %s", chave, valor)


__all__ = [
    "ROOT_LOGGER_NAME",
    "setup_logging",
    "get_logger",
    "log_session_start",
    "log_session_end",
    "log_metrics",
]

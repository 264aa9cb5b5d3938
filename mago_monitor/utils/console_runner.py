"""Execução do monitor no console com classificação de erros e espera.

Usado quando o monitor roda em janela própria (agendador do Windows):
mostra o resultado, explica falhas conhecidas e aguarda antes de fechar.
"""

from __future__ import annotations

import os
import sys
import time
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Type

from mago_monitor.core.exceptions import (
    ConfigError,
    FetchError,
    NoActualSeriesFound,
    NotificationError,
    ParseFailure,
)
from mago_monitor.utils.helpers import format_duration
from mago_monitor.utils.logger_config import get_logger, setup_logging

_IS_WINDOWS = os.name == "nt"
if _IS_WINDOWS:
    import msvcrt
else:
    import select

DEFAULT_WAIT_TIME = 300


class ErrorCategory(Enum):
    """Categorias de erro para mensagens amigáveis."""
    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    NO_DATA = "no_data"
    WRONG_SERIES = "wrong_series"
    EMAIL = "email"
    CONFIG = "config"
    FILE_NOT_FOUND = "file_not_found"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorInfo:
    category: ErrorCategory
    message: str
    suggestion: str
    original_error: str = ""
    error_type: str = ""


# Exceções do próprio monitor; verificadas antes dos padrões de texto
ERROR_TYPES: Tuple[Tuple[Type[BaseException], ErrorCategory, str, str], ...] = (
    (ParseFailure, ErrorCategory.NO_DATA,
     "Export sem leituras válidas",
     "Confira se o painel está no ar e se o export CSV/JSON mudou de formato"),
    (NoActualSeriesFound, ErrorCategory.WRONG_SERIES,
     "Série Empacotamento não encontrada",
     "O export trouxe apenas previsão/estimativa; verifique a série selecionada no painel"),
    (ConfigError, ErrorCategory.CONFIG,
     "Configuração inválida",
     "Revise config.yaml e o arquivo .env (RESEND_API_KEY, EMAIL_FROM, EMAIL_RECIPIENTS)"),
    (FetchError, ErrorCategory.CONNECTION,
     "Falha ao baixar o export do painel",
     "Verifique a conexão com a internet e a URL do export (EXPORT_URL)"),
    (NotificationError, ErrorCategory.EMAIL,
     "Falha no envio do e-mail",
     "Verifique a chave da Resend e se o domínio do remetente está verificado"),
)

ERROR_PATTERNS = {
    ("unauthorized", "401", "403", "invalid api key", "api key is invalid"): (
        ErrorCategory.AUTHENTICATION,
        "Falha na autenticação",
        "Verifique a RESEND_API_KEY no arquivo .env",
    ),
    ("connection refused", "connect timeout", "network unreachable", "name or service not known", "timed out"): (
        ErrorCategory.CONNECTION,
        "Falha na conexão de rede",
        "Verifique a conexão com a internet e se o painel está acessível",
    ),
    ("no such file", "file not found", "filenotfounderror"): (
        ErrorCategory.FILE_NOT_FOUND,
        "Arquivo não encontrado",
        "Verifique o caminho informado em --arquivo",
    ),
}


def classify_error(error: BaseException) -> ErrorInfo:
    """Classifica ``error`` em uma categoria com mensagem e sugestão."""
    texto = f"{type(error).__name__.lower()}: {str(error).lower()}"

    # Autenticação vence a categoria genérica de e-mail
    if isinstance(error, NotificationError) and error.status_code in (401, 403):
        return ErrorInfo(
            ErrorCategory.AUTHENTICATION,
            "Chave da Resend recusada",
            "Verifique a RESEND_API_KEY no arquivo .env",
            str(error),
            type(error).__name__,
        )

    for tipo, categoria, mensagem, sugestao in ERROR_TYPES:
        if isinstance(error, tipo):
            return ErrorInfo(categoria, mensagem, sugestao, str(error), type(error).__name__)

    for padroes, (categoria, mensagem, sugestao) in ERROR_PATTERNS.items():
        if any(padrao in texto for padrao in padroes):
            return ErrorInfo(categoria, mensagem, sugestao, str(error), type(error).__name__)

    return ErrorInfo(
        ErrorCategory.UNKNOWN,
        "Erro inesperado",
        "Consulte o arquivo de log para mais detalhes",
        str(error),
        type(error).__name__,
    )


def _kbhit() -> bool:
    if _IS_WINDOWS:
        return msvcrt.kbhit()
    prontos, _, _ = select.select([sys.stdin], [], [], 0)
    return bool(prontos)


def _getch() -> str:
    if _IS_WINDOWS:
        return msvcrt.getch().decode("utf-8", errors="ignore")
    return sys.stdin.read(1)


class ConsoleRunner:
    """Executa o monitor com logging, tratamento de erros e espera."""

    def __init__(self, project_name: str, base_dir: Path, wait_time: int = DEFAULT_WAIT_TIME):
        self.project_name = project_name.upper()
        self.base_dir = Path(base_dir)
        self.wait_time = wait_time
        self.logs_dir = self.base_dir / "data" / "logs"
        self.start_time: Optional[datetime] = None
        self.success = False
        self.error_info: Optional[ErrorInfo] = None

        setup_logging(self.logs_dir)
        self.logger = get_logger("console")

    def _print_header(self) -> None:
        separator = "=" * 60
        self.logger.info("")
        self.logger.info(separator)
        self.logger.info("   MONITOR %s", self.project_name)
        self.logger.info("   Iniciado em: %s", self.start_time.strftime("%d/%m/%Y %H:%M:%S"))
        self.logger.info(separator)
        self.logger.info("")

    def _print_success(self, duration: float) -> None:
        separator = "=" * 60
        self.logger.info("")
        self.logger.info(separator)
        self.logger.info("   EXECUÇÃO CONCLUÍDA COM SUCESSO")
        self.logger.info("   Duração: %s", format_duration(duration))
        self.logger.info("   Logs: %s", self.logs_dir)
        self.logger.info(separator)

    def _print_error(self, duration: float) -> None:
        separator = "=" * 60
        error_sep = "-" * 60
        info = self.error_info
        self.logger.error("")
        self.logger.error(separator)
        self.logger.error("   EXECUÇÃO FINALIZADA COM ERRO")
        self.logger.error(error_sep)
        self.logger.error("   TIPO: %s", info.message)
        self.logger.error("   Erro: %s", info.original_error[:200])
        self.logger.error("   SUGESTÃO: %s", info.suggestion)
        self.logger.error(error_sep)
        self.logger.error("   Duração: %s", format_duration(duration))
        self.logger.error("   Logs: %s", self.logs_dir)
        self.logger.error(separator)

    def _wait_before_close(self) -> None:
        if self.wait_time <= 0:
            return
        self.logger.info("")
        self.logger.info("   Console fechará automaticamente em %d minutos", self.wait_time // 60)
        self.logger.info("   Pressione qualquer tecla para fechar imediatamente")
        try:
            remaining = self.wait_time
            while remaining > 0:
                if _kbhit():
                    _getch()
                    print()
                    return
                if remaining % 30 == 0 or remaining <= 10:
                    print(f"\r   Tempo restante: {remaining // 60:02d}:{remaining % 60:02d}   ", end="", flush=True)
                time.sleep(1)
                remaining -= 1
            print()
        except KeyboardInterrupt:
            print()

    def run(self, pipeline_func: Callable[[], Any], show_traceback: bool = False) -> int:
        """Executa ``pipeline_func``. Retorna 0 em sucesso e 1 em erro."""
        self.start_time = datetime.now()
        self._print_header()

        try:
            pipeline_func()
            self.success = True
            self._print_success((datetime.now() - self.start_time).total_seconds())
        except KeyboardInterrupt:
            self.logger.warning("   EXECUÇÃO INTERROMPIDA PELO USUÁRIO")
            self.success = False
        except Exception as exc:
            self.error_info = classify_error(exc)
            self.logger.debug("Traceback completo:\n%s", traceback.format_exc())
            if show_traceback:
                self.logger.error(traceback.format_exc())
            self._print_error((datetime.now() - self.start_time).total_seconds())
            self.success = False

        self._wait_before_close()
        return 0 if self.success else 1


def run_with_console(
    project_name: str,
    base_dir: Path,
    pipeline_func: Callable[[], Any],
    wait_time: int = DEFAULT_WAIT_TIME,
    show_traceback: bool = False,
) -> int:
    """Atalho para ``ConsoleRunner(...).run(pipeline_func)``."""
    runner = ConsoleRunner(project_name=project_name, base_dir=base_dir, wait_time=wait_time)
    return runner.run(pipeline_func, show_traceback=show_traceback)


__all__ = [
    "DEFAULT_WAIT_TIME",
    "ErrorCategory",
    "ErrorInfo",
    "ConsoleRunner",
    "classify_error",
    "run_with_console",
]

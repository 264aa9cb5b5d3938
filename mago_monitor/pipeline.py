from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from mago_monitor.config.loader import ConfigLoader, LoadedConfig
from mago_monitor.core.assessment import assess_condition
from mago_monitor.core.extractor import ArquivoExtractor, BaseExtractor, DashboardExtractor
from mago_monitor.core.models import Assessment, ExtractionResult
from mago_monitor.utils.helpers import formatar_numero_br
from mago_monitor.utils.logger_config import (
    get_logger,
    log_metrics,
    log_session_end,
    log_session_start,
)
from mago_monitor.utils.resend_client import ResendClient

logger = get_logger("pipeline")


@dataclass(frozen=True)
class ResultadoMonitor:
    """Resumo de uma execução completa."""

    extracao: ExtractionResult
    avaliacao: Assessment
    message_id: Optional[str] = None
    enviado: bool = False


@dataclass(slots=True)
class Pipeline:
    """High-level access point for extraction, assessment and notification."""

    loader: ConfigLoader = field(default_factory=ConfigLoader)
    _config: LoadedConfig | None = field(default=None, init=False, repr=False)

    def _get_config(self) -> LoadedConfig:
        if self._config is None:
            self._config = self.loader.load()
        return self._config

    # ---- Extraction layer -------------------------------------------------

    def _extractor(self, arquivo: Optional[Path]) -> BaseExtractor:
        config = self._get_config()
        if arquivo is not None:
            return ArquivoExtractor(arquivo, config, self.loader.base_path)
        return DashboardExtractor(config, self.loader.base_path)

    def extract(self, now: Optional[datetime] = None, arquivo: Optional[Path] = None) -> ExtractionResult:
        log_session_start("Extração")
        try:
            resultado = self._extractor(arquivo).extrair(now)
        except Exception:
            log_session_end("Extração", success=False)
            raise
        log_metrics("Extração", {
            "valor": formatar_numero_br(resultado.value),
            "hora_registro": f"{resultado.hour:02d}:00",
            "hora_alvo": f"{resultado.target_hour:02d}:00",
            "tag": resultado.tag,
            "fallback": resultado.used_fallback,
            "candidatos": resultado.total_candidates,
        })
        log_session_end("Extração")
        return resultado

    # ---- Assessment / notification ----------------------------------------

    def assess(self, extracao: ExtractionResult) -> Assessment:
        avaliacao = assess_condition(extracao.value, self._get_config().thresholds())
        logger.info("Avaliação: %s | %s", avaliacao.status, avaliacao.message)
        return avaliacao

    def notify(self, avaliacao: Assessment, extracao: Optional[ExtractionResult] = None) -> Optional[str]:
        config = self._get_config()
        cliente = ResendClient.from_config(config)
        screenshot = config.resolve_path("screenshot")
        log_session_start("Notificação")
        try:
            message_id = cliente.enviar(avaliacao, extracao, screenshot)
        except Exception:
            log_session_end("Notificação", success=False)
            raise
        log_session_end("Notificação")
        return message_id

    def run(
        self,
        now: Optional[datetime] = None,
        arquivo: Optional[Path] = None,
        enviar: bool = True,
    ) -> ResultadoMonitor:
        extracao = self.extract(now, arquivo)
        avaliacao = self.assess(extracao)
        if not enviar:
            return ResultadoMonitor(extracao=extracao, avaliacao=avaliacao)
        message_id = self.notify(avaliacao, extracao)
        return ResultadoMonitor(extracao=extracao, avaliacao=avaliacao, message_id=message_id, enviado=True)


__all__ = ["Pipeline", "ResultadoMonitor"]

"""Extração do valor oficial de Empacotamento.

- extract_value: ponto de entrada puro (payload bruto + instante -> resultado)
- DashboardExtractor: busca o export do painel (HTTP) e aplica extract_value
- ArquivoExtractor: aplica extract_value a um payload salvo em disco
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from mago_monitor.config.loader import ConfigLoader, LoadedConfig
from mago_monitor.core.models import ExtractionResult
from mago_monitor.core.record_parser import parse_payload
from mago_monitor.core.selector import select
from mago_monitor.core.time_bucket import DEFAULT_TIMEZONE, last_complete_bucket
from mago_monitor.utils.dashboard_client import Payload, PayloadFetcher, ler_arquivo
from mago_monitor.utils.helpers import format_duration, formatar_numero_br, print_section
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("extractor")


# =============================================================================
# PONTO DE ENTRADA
# =============================================================================

def extract_value(
    raw_payload: Payload,
    now: datetime,
    *,
    timezone: Optional[str] = DEFAULT_TIMEZONE,
    magnitude_range: Optional[Tuple[float, float]] = None,
) -> ExtractionResult:
    """Extrai o valor de Empacotamento da última hora completa.

    Args:
        raw_payload: CSV/texto (str ou bytes) ou JSON já decodificado
        now: Instante de referência (naive = horário local do painel)
        timezone: Fuso do painel
        magnitude_range: Faixa (min, max) aceita para registros sem rótulo

    Returns:
        ExtractionResult com valor, hora e timestamp do registro escolhido

    Raises:
        ParseFailure: nenhum registro válido no payload
        NoActualSeriesFound: payload sem a série Empacotamento
    """
    candidatos = parse_payload(raw_payload, timezone=timezone)
    dia_alvo, hora_alvo = last_complete_bucket(now, timezone)
    logger.info("Hora alvo: %02d:00 de %s (%d candidatos)", hora_alvo, dia_alvo.strftime("%d/%m/%Y"), len(candidatos))

    selecao = select(
        candidatos,
        target_hour=hora_alvo,
        target_date=dia_alvo,
        magnitude_range=magnitude_range,
        timezone=timezone,
    )
    registro = selecao.record
    return ExtractionResult(
        value=registro.value,
        hour=registro.hour,
        timestamp=registro.timestamp,
        tag=registro.tag,
        target_hour=hora_alvo,
        used_fallback=selecao.used_fallback,
        total_candidates=len(candidatos),
    )


# =============================================================================
# EXTRATORES
# =============================================================================

class BaseExtractor(ABC):
    """Classe base para extratores."""

    def __init__(self, config: Optional[LoadedConfig] = None, base_path: Optional[Path] = None):
        if config is not None:
            self.config = config
            self.base_path = getattr(config, "base_path", base_path or Path.cwd())
        else:
            self.base_path = base_path or Path(__file__).resolve().parents[2]
            self.config = ConfigLoader(base_path=self.base_path).load()

    @abstractmethod
    def obter_payload(self) -> Payload:
        """Retorna o payload bruto a ser interpretado."""

    @property
    def origem(self) -> str:
        return self.__class__.__name__

    def extrair(self, now: Optional[datetime] = None) -> ExtractionResult:
        """Obtém o payload e extrai o valor para ``now`` (padrão: agora)."""
        inicio = time.time()
        payload = self.obter_payload()
        resultado = extract_value(
            payload,
            now or datetime.now(ZoneInfo(self.config.timezone)),
            timezone=self.config.timezone,
            magnitude_range=self.config.magnitude_range(),
        )
        duracao = time.time() - inicio

        linhas = [
            f"Origem: {self.origem}",
            f"Candidatos: {resultado.total_candidates}",
            f"Hora alvo: {resultado.target_hour:02d}:00",
            f"Hora do registro: {resultado.hour:02d}:00",
            f"Valor: {formatar_numero_br(resultado.value)}",
        ]
        if resultado.used_fallback:
            linhas.append("[AVISO] Hora alvo indisponível; usado o registro mais recente")
        linhas.append(f"Duração: {format_duration(duracao)}")
        print_section("EXTRAÇÃO - EMPACOTAMENTO", linhas)
        return resultado


class DashboardExtractor(BaseExtractor):
    """Extrator via export HTTP do painel."""

    def __init__(
        self,
        config: Optional[LoadedConfig] = None,
        base_path: Optional[Path] = None,
        fetcher: Optional[PayloadFetcher] = None,
    ):
        super().__init__(config, base_path)
        self.fetcher = fetcher or PayloadFetcher.from_config(self.config)

    @property
    def origem(self) -> str:
        return self.fetcher.url

    def obter_payload(self) -> Payload:
        return self.fetcher.fetch()


class ArquivoExtractor(BaseExtractor):
    """Extrator a partir de CSV/JSON salvo em disco."""

    def __init__(self, arquivo: Path, config: Optional[LoadedConfig] = None, base_path: Optional[Path] = None):
        super().__init__(config, base_path)
        self.arquivo = Path(arquivo)

    @property
    def origem(self) -> str:
        return str(self.arquivo)

    def obter_payload(self) -> Payload:
        return ler_arquivo(self.arquivo)


__all__ = [
    "extract_value",
    "BaseExtractor",
    "DashboardExtractor",
    "ArquivoExtractor",
]

"""Seleção do valor oficial da última hora completa.

Regras:
1. Só entram registros da série real (Empacotamento)
2. Filtra hora <= hora alvo; com dia alvo, compara (dia local, hora), de modo
   que registros de dias anteriores contam como anteriores à hora alvo
3. Ordena por timestamp decrescente; no mesmo timestamp, qualidade boa vence
4. Sem registro até a hora alvo: usa o Empacotamento mais recente (fallback)
5. Sem nenhum Empacotamento: NoActualSeriesFound
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from mago_monitor.core.exceptions import NoActualSeriesFound
from mago_monitor.core.models import CandidateRecord, SelectionResult, SeriesKind
from mago_monitor.core.time_bucket import DEFAULT_TIMEZONE
from mago_monitor.utils.helpers import formatar_numero_br
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("selector")


def _chave_ordenacao(registro: CandidateRecord) -> Tuple:
    return (registro.timestamp, registro.quality is True)


def _mais_recente(registros: Iterable[CandidateRecord]) -> CandidateRecord:
    return sorted(registros, key=_chave_ordenacao, reverse=True)[0]


def _dia_local(registro: CandidateRecord, timezone: Optional[str]) -> date:
    if timezone is None:
        return registro.timestamp.date()
    return registro.timestamp.astimezone(ZoneInfo(timezone)).date()


def _ate_hora_alvo(
    registros: Sequence[CandidateRecord],
    target_hour: int,
    target_date: Optional[date],
    timezone: Optional[str],
) -> List[CandidateRecord]:
    if target_date is None:
        return [r for r in registros if r.hour <= target_hour]
    return [r for r in registros if (_dia_local(r, timezone), r.hour) <= (target_date, target_hour)]


def _dentro_da_faixa(registro: CandidateRecord, faixa: Tuple[float, float]) -> bool:
    minimo, maximo = faixa
    return minimo <= registro.value <= maximo


def select(
    candidates: Sequence[CandidateRecord],
    target_hour: int,
    target_date: Optional[date] = None,
    magnitude_range: Optional[Tuple[float, float]] = None,
    timezone: Optional[str] = DEFAULT_TIMEZONE,
) -> SelectionResult:
    """Escolhe o registro oficial para ``target_hour``.

    Args:
        candidates: Registros já classificados
        target_hour: Última hora completa
        target_date: Dia da hora alvo; quando informado, compara (dia, hora).
            Ex.: 20h de ontem vale para a hora alvo 10h de hoje sem fallback
        magnitude_range: Último recurso opcional. Sem Empacotamento, aceita
            registros sem série reconhecida dentro da faixa. Previsões nunca.
        timezone: Fuso usado para obter o dia local dos registros

    Returns:
        SelectionResult com ``used_fallback`` indicando se a hora alvo foi ignorada

    Raises:
        NoActualSeriesFound: nenhum registro da série real
    """
    reais = [r for r in candidates if r.series_kind is SeriesKind.ACTUAL]
    fallback_magnitude = False

    if not reais and magnitude_range is not None:
        reais = [
            r for r in candidates
            if r.series_kind is SeriesKind.UNKNOWN and _dentro_da_faixa(r, magnitude_range)
        ]
        fallback_magnitude = bool(reais)
        if fallback_magnitude:
            logger.warning(
                "Nenhum Empacotamento rotulado; usando %d registros por faixa de valor %s",
                len(reais),
                magnitude_range,
            )

    if not reais:
        previsoes = sum(1 for r in candidates if r.series_kind is SeriesKind.FORECAST)
        raise NoActualSeriesFound(
            f"Nenhum registro Empacotamento entre {len(candidates)} candidatos "
            f"({previsoes} de previsão/estimativa)",
            total_candidatos=len(candidates),
        )

    validos = _ate_hora_alvo(reais, target_hour, target_date, timezone)
    if validos:
        escolhido = _mais_recente(validos)
        logger.info(
            "Valor selecionado: %s (hora %02d:00, tag '%s')",
            formatar_numero_br(escolhido.value),
            escolhido.hour,
            escolhido.tag,
        )
        return SelectionResult(record=escolhido, used_fallback=fallback_magnitude)

    escolhido = _mais_recente(reais)
    logger.warning(
        "Nenhum Empacotamento até %02d:00; usando o mais recente: %s (hora %02d:00)",
        target_hour,
        formatar_numero_br(escolhido.value),
        escolhido.hour,
    )
    return SelectionResult(record=escolhido, used_fallback=True)


__all__ = ["select"]

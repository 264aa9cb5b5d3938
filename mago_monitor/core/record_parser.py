#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Parser de payloads do dashboard em registros candidatos.

Formatos aceitos:
- Tabela delimitada exportada pelo dashboard (``Informação,Data,Valor``),
  com data ``DD/MM/YYYY, HH:MM:SS`` e valores no padrão brasileiro
- JSON em um dos formatos conhecidos (lista simples, ``{data: [...]}``,
  ``{tag: [...]}``, ``{series: [{name, data}]}``, ``{Items: [...]}``)

Linhas ou itens malformados são descartados. Só há erro quando nenhum
registro sobra (``ParseFailure``).
"""

from __future__ import annotations

import html
import io
import json
import re
from datetime import datetime
from numbers import Number
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence
from zoneinfo import ZoneInfo

import pandas as pd

from mago_monitor.core.classifier import classify
from mago_monitor.core.exceptions import ParseFailure
from mago_monitor.core.models import CandidateRecord
from mago_monitor.core.time_bucket import DEFAULT_TIMEZONE
from mago_monitor.utils.helpers import normalize_ascii_lower, normalizar_decimal
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("record_parser")

UTC = ZoneInfo("UTC")

FORMATO_DATA_BR = "%d/%m/%Y, %H:%M:%S"

_DATA_BR_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4}),?\s*(\d{1,2}):(\d{2})(?::(\d{2}))?")
_HTML_TAG_RE = re.compile(r"<[^>]*>")

TAG_KEYS = ("tag", "name", "nome", "informacao", "label", "serie", "series")
TIMESTAMP_KEYS = ("timestamp", "datetime", "date", "data", "time", "hora", "x")
VALUE_KEYS = ("value", "valor", "y", "v")
QUALITY_KEYS = ("good", "quality", "qualidade")


# =============================================================================
# CONVERSÕES
# =============================================================================

def _epoch_para_datetime(numero: float) -> Optional[datetime]:
    """Converte epoch (segundos ou milissegundos) em datetime UTC."""
    try:
        segundos = numero / 1000.0 if abs(numero) > 1e11 else numero
        return datetime.fromtimestamp(segundos, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(valor: Any) -> Optional[datetime]:
    """Interpreta datas BR, ISO 8601 ou epoch. Retorna None se inválida.

    Datas sem fuso continuam naive e são lidas no fuso do dashboard.
    """
    if valor is None or isinstance(valor, bool):
        return None

    if isinstance(valor, pd.Timestamp):
        return None if pd.isna(valor) else valor.to_pydatetime()

    if isinstance(valor, datetime):
        return valor

    if isinstance(valor, Number):
        return _epoch_para_datetime(float(valor))

    texto = str(valor).strip()
    if not texto:
        return None

    match = _DATA_BR_RE.fullmatch(texto)
    if match:
        dia, mes, ano, hora, minuto, segundo = match.groups()
        try:
            return datetime(int(ano), int(mes), int(dia), int(hora), int(minuto), int(segundo or 0))
        except ValueError:
            return None

    if texto.isdigit():
        return _epoch_para_datetime(float(texto))

    try:
        ts = pd.to_datetime(texto, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _float_json(valor: Any) -> Optional[float]:
    """Valor numérico de um item JSON (float simples, sem separador de milhar)."""
    if isinstance(valor, dict):
        for chave, interno in valor.items():
            if str(chave).lower() in VALUE_KEYS:
                return _float_json(interno)
        return None
    if valor is None or isinstance(valor, bool):
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    if pd.isna(numero):
        return None
    return numero


def _parse_qualidade(valor: Any) -> Optional[bool]:
    if isinstance(valor, bool):
        return valor
    if isinstance(valor, str):
        texto = valor.strip().lower()
        if texto in {"good", "true", "1", "ok", "boa"}:
            return True
        if texto in {"bad", "false", "0", "ruim"}:
            return False
    return None


def build_record(
    tag: Any,
    instante: datetime,
    valor: float,
    qualidade: Optional[bool] = None,
    timezone: Optional[str] = DEFAULT_TIMEZONE,
) -> CandidateRecord:
    """Monta um CandidateRecord já classificado.

    ``hour`` é a hora no fuso do dashboard; ``timestamp`` é gravado em UTC.
    """
    fuso = ZoneInfo(timezone) if timezone else UTC
    if instante.tzinfo is None:
        local = instante.replace(tzinfo=fuso)
    else:
        local = instante.astimezone(fuso)

    rotulo = "" if tag is None else str(tag).strip()
    return CandidateRecord(
        tag=rotulo,
        timestamp=local.astimezone(UTC),
        hour=local.hour,
        value=float(valor),
        quality=qualidade,
        series_kind=classify(rotulo),
    )


# =============================================================================
# TABELA DELIMITADA (CSV)
# =============================================================================

def _isolar_tabela(texto: str) -> str:
    """Remove HTML e descarta o que vem antes do cabeçalho Data/Valor."""
    if "<" in texto and ">" in texto:
        texto = html.unescape(_HTML_TAG_RE.sub("\n", texto))

    linhas = [linha for linha in texto.splitlines() if linha.strip()]
    for idx, linha in enumerate(linhas):
        normalizada = normalize_ascii_lower(linha)
        if "data" in normalizada and "valor" in normalizada:
            return "\n".join(linhas[idx:])
    return "\n".join(linhas)


def _detectar_separador(cabecalho: str) -> str:
    return ";" if cabecalho.count(";") > cabecalho.count(",") else ","


def parse_text_table(texto: str, timezone: Optional[str] = DEFAULT_TIMEZONE) -> List[CandidateRecord]:
    """Lê a tabela ``rótulo, data, valor`` e devolve os registros válidos."""
    tabela = _isolar_tabela(texto)
    if not tabela:
        return []

    sep = _detectar_separador(tabela.splitlines()[0])
    try:
        df = pd.read_csv(
            io.StringIO(tabela),
            sep=sep,
            dtype=str,
            header=0,
            skipinitialspace=True,
            on_bad_lines="skip",
            engine="python",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as exc:
        logger.debug("Tabela ilegível: %s", exc)
        return []

    if df.shape[1] < 3 or df.empty:
        return []

    rotulos = df.iloc[:, 0]
    datas_texto = df.iloc[:, 1].astype(str).str.strip()
    datas = pd.to_datetime(datas_texto, format=FORMATO_DATA_BR, errors="coerce")
    valores = df.iloc[:, 2]

    registros: List[CandidateRecord] = []
    descartadas = 0
    for rotulo, data_vetor, data_bruta, valor_bruto in zip(rotulos, datas, datas_texto, valores):
        if rotulo is None or pd.isna(rotulo) or not str(rotulo).strip():
            descartadas += 1
            continue
        instante = parse_timestamp(data_vetor) if not pd.isna(data_vetor) else parse_timestamp(data_bruta)
        valor = normalizar_decimal(valor_bruto)
        if instante is None or valor is None:
            descartadas += 1
            continue
        registros.append(build_record(rotulo, instante, valor, None, timezone))

    logger.debug("Tabela: %d registros válidos, %d linhas descartadas", len(registros), descartadas)
    return registros


# =============================================================================
# JSON
# =============================================================================

def _campo(item: Dict[str, Any], chaves: Sequence[str]) -> Any:
    """Primeiro campo presente (case/acento insensitive)."""
    normalizado = {normalize_ascii_lower(str(k)): v for k, v in item.items()}
    for chave in chaves:
        valor = normalizado.get(chave)
        if valor is not None:
            return valor
    return None


def _registro_de_item(item: Any, tag_padrao: Optional[str], timezone: Optional[str]) -> Optional[CandidateRecord]:
    """Converte um item JSON (dict ou par ``[x, y]``) em registro."""
    if isinstance(item, (list, tuple)):
        if len(item) < 2:
            return None
        instante = parse_timestamp(item[0])
        valor = _float_json(item[1])
        tag, qualidade = tag_padrao, None
    elif isinstance(item, dict):
        tag = _campo(item, TAG_KEYS)
        if not isinstance(tag, str) or not tag.strip():
            tag = tag_padrao
        instante = parse_timestamp(_campo(item, TIMESTAMP_KEYS))
        bruto = _campo(item, VALUE_KEYS)
        valor = _float_json(bruto)
        qualidade = _parse_qualidade(_campo(item, QUALITY_KEYS))
        if qualidade is None and isinstance(bruto, dict):
            qualidade = _parse_qualidade(_campo(bruto, QUALITY_KEYS))
        if instante is None and isinstance(bruto, dict):
            instante = parse_timestamp(_campo(bruto, TIMESTAMP_KEYS))
    else:
        return None

    if instante is None or valor is None:
        return None
    return build_record(tag, instante, valor, qualidade, timezone)


def _registros_de_itens(itens: Iterable[Any], tag_padrao: Optional[str], timezone: Optional[str]) -> List[CandidateRecord]:
    registros = []
    for item in itens:
        registro = _registro_de_item(item, tag_padrao, timezone)
        if registro is not None:
            registros.append(registro)
    return registros


def _lista_em(dados: Any, chave: str) -> Optional[list]:
    if not isinstance(dados, dict):
        return None
    for k, v in dados.items():
        if str(k).lower() == chave and isinstance(v, list):
            return v
    return None


def _extrair_items(dados: Dict[str, Any], timezone: Optional[str]) -> List[CandidateRecord]:
    registros: List[CandidateRecord] = []
    for entrada in _lista_em(dados, "items") or []:
        internos = _lista_em(entrada, "items")
        if internos is not None:
            tag = _campo(entrada, TAG_KEYS)
            registros.extend(_registros_de_itens(internos, tag, timezone))
        else:
            registros.extend(_registros_de_itens([entrada], None, timezone))
    return registros


def _extrair_series(dados: Dict[str, Any], timezone: Optional[str]) -> List[CandidateRecord]:
    registros: List[CandidateRecord] = []
    for serie in _lista_em(dados, "series") or []:
        if not isinstance(serie, dict):
            continue
        pontos = _lista_em(serie, "data")
        if pontos is None:
            continue
        registros.extend(_registros_de_itens(pontos, _campo(serie, TAG_KEYS), timezone))
    return registros


def _extrair_data(dados: Dict[str, Any], timezone: Optional[str]) -> List[CandidateRecord]:
    for chave, valor in dados.items():
        if str(chave).lower() != "data":
            continue
        if isinstance(valor, list):
            return _registros_de_itens(valor, None, timezone)
        if isinstance(valor, dict):
            return parse_json_payload(valor, timezone)
    return []


def _extrair_mapa_tags(dados: Dict[str, Any], timezone: Optional[str]) -> List[CandidateRecord]:
    registros: List[CandidateRecord] = []
    for chave, valor in dados.items():
        if isinstance(valor, list):
            registros.extend(_registros_de_itens(valor, str(chave), timezone))
    return registros


class _Formato(NamedTuple):
    nome: str
    aceita: Callable[[Any], bool]
    extrair: Callable[[Any, Optional[str]], List[CandidateRecord]]


_FORMATOS_JSON: Sequence[_Formato] = (
    _Formato("items", lambda d: _lista_em(d, "items") is not None, _extrair_items),
    _Formato("series", lambda d: _lista_em(d, "series") is not None, _extrair_series),
    _Formato(
        "data",
        lambda d: isinstance(d, dict) and any(str(k).lower() == "data" and isinstance(v, (list, dict)) for k, v in d.items()),
        _extrair_data,
    ),
    _Formato("lista", lambda d: isinstance(d, list), lambda d, tz: _registros_de_itens(d, None, tz)),
    _Formato("mapa_tags", lambda d: isinstance(d, dict), _extrair_mapa_tags),
)


def parse_json_payload(dados: Any, timezone: Optional[str] = DEFAULT_TIMEZONE) -> List[CandidateRecord]:
    """Aplica os formatos JSON em ordem; vence o primeiro que gerar registros."""
    for formato in _FORMATOS_JSON:
        if not formato.aceita(dados):
            continue
        registros = formato.extrair(dados, timezone)
        if registros:
            logger.debug("JSON no formato '%s': %d registros", formato.nome, len(registros))
            return registros
    return []


# =============================================================================
# ENTRADA ÚNICA
# =============================================================================

def parse_payload(raw: Any, timezone: Optional[str] = DEFAULT_TIMEZONE) -> List[CandidateRecord]:
    """Converte o payload bruto (texto, bytes, dict ou list) em registros.

    Raises:
        ParseFailure: nenhum registro utilizável
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8-sig", errors="replace")

    if isinstance(raw, str):
        texto = raw.strip().lstrip("\ufeff")
        if not texto:
            raise ParseFailure("Payload vazio", formato="texto")
        dados = None
        if texto[0] in "[{":
            try:
                dados = json.loads(texto)
            except ValueError:
                dados = None
        if dados is not None:
            formato = "json"
            registros = parse_json_payload(dados, timezone)
        else:
            formato = "texto"
            registros = parse_text_table(texto, timezone)
    elif isinstance(raw, (dict, list)):
        formato = "json"
        registros = parse_json_payload(raw, timezone)
    else:
        raise ParseFailure(f"Tipo de payload não suportado: {type(raw).__name__}")

    if not registros:
        raise ParseFailure(f"Nenhum registro válido encontrado no payload ({formato})", formato=formato)

    logger.info("Registros candidatos encontrados: %d (%s)", len(registros), formato)
    return registros


__all__ = [
    "FORMATO_DATA_BR",
    "parse_timestamp",
    "build_record",
    "parse_text_table",
    "parse_json_payload",
    "parse_payload",
]

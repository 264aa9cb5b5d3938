#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Diagnóstico da extração: mostra os candidatos e a seleção.

Uso:
    python scripts/extrair_valor.py                 # baixa o export
    python scripts/extrair_valor.py arquivo.csv     # usa payload local
    python scripts/extrair_valor.py --salvar        # grava o payload em data/debug/
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pandas as pd
from dotenv import load_dotenv

BASE = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE))

from mago_monitor.config.loader import ConfigLoader
from mago_monitor.core.exceptions import ExtractionError
from mago_monitor.core.extractor import extract_value
from mago_monitor.core.record_parser import parse_payload
from mago_monitor.utils.dashboard_client import PayloadFetcher, ler_arquivo
from mago_monitor.utils.helpers import formatar_numero_br, generate_timestamp, print_section


def _salvar(payload, destino_dir: Path) -> Path:
    destino_dir.mkdir(parents=True, exist_ok=True)
    if isinstance(payload, (dict, list)):
        destino = destino_dir / f"payload_{generate_timestamp()}.json"
        destino.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    else:
        destino = destino_dir / f"payload_{generate_timestamp()}.csv"
        destino.write_bytes(payload if isinstance(payload, bytes) else str(payload).encode("utf-8"))
    return destino


def main() -> int:
    load_dotenv(BASE / ".env")
    config = ConfigLoader(base_path=BASE).load()

    argumentos = [a for a in sys.argv[1:] if not a.startswith("--")]
    if argumentos:
        payload = ler_arquivo(Path(argumentos[0]))
    else:
        payload = PayloadFetcher.from_config(config).fetch()

    if "--salvar" in sys.argv:
        print(f"Payload salvo em: {_salvar(payload, BASE / 'data' / 'debug')}")

    candidatos = parse_payload(payload, timezone=config.timezone)
    df = pd.DataFrame(
        {
            "tag": c.tag,
            "serie": c.series_kind.value,
            "hora": c.hour,
            "timestamp": c.timestamp,
            "valor": formatar_numero_br(c.value),
            "qualidade": c.quality,
        }
        for c in candidatos
    )
    resumo = df.groupby("serie").size().to_dict() if not df.empty else {}
    print_section(
        "CANDIDATOS",
        [f"Total: {len(candidatos)}"] + [f"  {serie}: {qtd}" for serie, qtd in resumo.items()],
    )
    with pd.option_context("display.max_rows", 60, "display.width", 160):
        print(df.sort_values("timestamp", ascending=False).head(30).to_string(index=False))

    try:
        resultado = extract_value(
            payload,
            datetime.now(ZoneInfo(config.timezone)),
            timezone=config.timezone,
            magnitude_range=config.magnitude_range(),
        )
    except ExtractionError as exc:
        print_section("SELEÇÃO", [f"[ERRO] {exc}"])
        return 1

    print_section(
        "SELEÇÃO",
        [
            f"Hora alvo: {resultado.target_hour:02d}:00",
            f"Registro: {resultado.hour:02d}:00 ({resultado.tag})",
            f"Valor: {formatar_numero_br(resultado.value)}",
            f"Fallback: {'sim' if resultado.used_fallback else 'não'}",
        ],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Carregamento de configuração (config.yaml + variáveis de ambiente).

Ordem de precedência: variáveis de ambiente > config.yaml > padrões.
O ``.env`` é carregado pelo ``main.py`` antes do loader.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from mago_monitor.core.exceptions import ConfigError
from mago_monitor.core.models import ThresholdSet
from mago_monitor.utils.helpers import normalizar_decimal

DEFAULT_CONFIG: Dict[str, Any] = {
    "global": {
        "timezone": "America/Sao_Paulo",
    },
    "dashboard": {
        "website_url": "https://mago.ntag.com.br/empacotamento",
        "export_url": "https://api-mago-prod-lb.ntag.com.br/api/empacotamento/export.csv",
        "timeout": 30,
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "magnitude_fallback": {
            "enabled": False,
            "min": 50_000_000,
            "max": 80_000_000,
        },
    },
    "thresholds": {
        "critico_put": 70_500_000,
        "alerta_put": 68_500_000,
        "alerta_call": 66_500_000,
        "critico_call": 64_000_000,
    },
    "email": {
        "api_url": "https://api.resend.com/emails",
        "api_key": None,
        "from": None,
        "reply_to": None,
        "recipients": [],
        "subject": "MAGO TAG - Monitoramento de Empacotamento",
        "timeout": 30,
    },
    "paths": {
        "screenshot": "data/output/screenshot.png",
        "logs": "data/logs",
    },
}

# variável de ambiente -> (seção, chave)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "DASHBOARD_TIMEZONE": ("global", "timezone"),
    "WEBSITE_URL": ("dashboard", "website_url"),
    "EXPORT_URL": ("dashboard", "export_url"),
    "CRITICO_PUT": ("thresholds", "critico_put"),
    "ALERTA_PUT": ("thresholds", "alerta_put"),
    "ALERTA_CALL": ("thresholds", "alerta_call"),
    "CRITICO_CALL": ("thresholds", "critico_call"),
    "RESEND_API_KEY": ("email", "api_key"),
    "EMAIL_FROM": ("email", "from"),
    "EMAIL_REPLY_TO": ("email", "reply_to"),
    "EMAIL_SUBJECT": ("email", "subject"),
    "EMAIL_RECIPIENTS": ("email", "recipients"),
    "SCREENSHOT_PATH": ("paths", "screenshot"),
}


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Merge recursivo de dicionários (``extra`` sobrescreve ``base``)."""
    resultado = copy.deepcopy(base)
    for chave, valor in (extra or {}).items():
        if isinstance(valor, dict) and isinstance(resultado.get(chave), dict):
            resultado[chave] = _merge(resultado[chave], valor)
        else:
            resultado[chave] = valor
    return resultado


def parse_recipients(raw: Any) -> List[str]:
    """Aceita lista, JSON (``'["a@b.com"]'``) ou texto separado por vírgula."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if str(item).strip()]
    texto = str(raw).strip()
    if not texto:
        return []
    if texto.startswith("["):
        try:
            itens = json.loads(texto)
        except ValueError as exc:
            raise ConfigError(f"EMAIL_RECIPIENTS inválido: {exc}") from exc
        return parse_recipients(itens)
    return [parte.strip() for parte in texto.split(",") if parte.strip()]


@dataclass
class LoadedConfig:
    """Configuração já mesclada."""

    data: Dict[str, Any]
    base_path: Path
    source: Optional[Path] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def timezone(self) -> str:
        return self.data.get("global", {}).get("timezone") or "America/Sao_Paulo"

    def thresholds(self) -> ThresholdSet:
        cfg = self.data.get("thresholds", {})
        valores = {}
        for nome in ("critico_put", "alerta_put", "alerta_call", "critico_call"):
            numero = normalizar_decimal(cfg.get(nome))
            if numero is None:
                raise ConfigError(f"Limite '{nome}' inválido: {cfg.get(nome)!r}")
            valores[nome] = numero
        return ThresholdSet(**valores)

    def magnitude_range(self) -> Optional[Tuple[float, float]]:
        cfg = self.data.get("dashboard", {}).get("magnitude_fallback", {}) or {}
        if not cfg.get("enabled"):
            return None
        return float(cfg.get("min", 0)), float(cfg.get("max", 0))

    def resolve_path(self, key: str) -> Optional[Path]:
        """Caminho absoluto de ``paths.<key>``; ``None`` quando não configurado."""
        valor = self.data.get("paths", {}).get(key)
        if valor is None or str(valor).strip() == "":
            return None
        caminho = Path(str(valor).strip())
        return caminho if caminho.is_absolute() else self.base_path / caminho


@dataclass
class ConfigLoader:
    """Lê ``config.yaml`` em ``base_path`` e aplica overrides de ambiente."""

    base_path: Path = field(default_factory=Path.cwd)
    filename: str = "config.yaml"

    def __post_init__(self) -> None:
        self.base_path = Path(self.base_path)

    @property
    def config_path(self) -> Path:
        return self.base_path / self.filename

    def _ler_yaml(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, "r", encoding="utf-8") as fh:
                conteudo = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Erro ao ler {self.config_path}: {exc}") from exc
        if not isinstance(conteudo, dict):
            raise ConfigError(f"{self.config_path} deve conter um mapeamento YAML")
        return conteudo

    def _aplicar_ambiente(self, data: Dict[str, Any]) -> None:
        for variavel, (secao, chave) in ENV_OVERRIDES.items():
            valor = os.getenv(variavel)
            if valor is None or valor.strip() == "":
                continue
            if variavel == "EMAIL_RECIPIENTS":
                data.setdefault(secao, {})[chave] = parse_recipients(valor)
            else:
                data.setdefault(secao, {})[chave] = valor.strip()

    def load(self) -> LoadedConfig:
        data = _merge(DEFAULT_CONFIG, self._ler_yaml())
        self._aplicar_ambiente(data)
        data["email"]["recipients"] = parse_recipients(data["email"].get("recipients"))
        origem = self.config_path if self.config_path.exists() else None
        return LoadedConfig(data=data, base_path=self.base_path, source=origem)


__all__ = [
    "DEFAULT_CONFIG",
    "ENV_OVERRIDES",
    "ConfigLoader",
    "LoadedConfig",
    "parse_recipients",
]

"""Download do export do painel MAGO TAG (CSV ou JSON)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from mago_monitor.core.exceptions import FetchError
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("dashboard_client")

Payload = Union[str, bytes, Dict[str, Any], list]


@dataclass
class PayloadFetcher:
    """Busca o payload bruto do export; sem estado entre chamadas."""

    url: str
    timeout: float = 30
    user_agent: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "PayloadFetcher":
        dashboard = config.get("dashboard", {})
        return cls(
            url=dashboard.get("export_url"),
            timeout=float(dashboard.get("timeout", 30)),
            user_agent=dashboard.get("user_agent"),
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "text/csv, application/json;q=0.9, */*;q=0.5"}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers

    def fetch(self) -> Payload:
        """Baixa o export e devolve JSON decodificado ou o texto do corpo.

        Raises:
            FetchError: falha de conexão, timeout ou status HTTP de erro
        """
        if not self.url:
            raise FetchError("URL de export não configurada (dashboard.export_url / EXPORT_URL)")

        logger.info("Baixando export: %s", self.url)
        try:
            response = requests.get(self.url, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as exc:
            raise FetchError(f"Timeout ao baixar export após {self.timeout}s: {self.url}") from exc
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise FetchError(f"Export retornou HTTP {status}: {self.url}") from exc
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"Falha de conexão com o painel: {exc}") from exc

        content_type = response.headers.get("Content-Type", "")
        logger.debug("Resposta %s (%s, %d bytes)", response.status_code, content_type, len(response.content))
        if "json" in content_type.lower():
            try:
                return response.json()
            except ValueError:
                logger.warning("Content-Type JSON mas corpo inválido; tratando como texto")
        return response.content


def ler_arquivo(caminho: Path) -> bytes:
    """Lê um payload salvo em disco (CSV baixado ou JSON capturado)."""
    caminho = Path(caminho)
    if not caminho.exists():
        raise FetchError(f"Arquivo de payload não encontrado: {caminho}")
    logger.info("Lendo payload local: %s", caminho)
    return caminho.read_bytes()


__all__ = ["Payload", "PayloadFetcher", "ler_arquivo"]

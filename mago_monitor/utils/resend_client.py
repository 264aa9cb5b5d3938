"""Envio da notificação por e-mail via API Resend."""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import requests

from mago_monitor.core.assessment import severity_color, severity_emoji
from mago_monitor.core.exceptions import ConfigError, NotificationError
from mago_monitor.core.models import Assessment, ExtractionResult
from mago_monitor.utils.logger_config import get_logger

logger = get_logger("resend_client")

RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_SENDER = "intel@saturnotrading.com.br"
DEFAULT_SUBJECT = "MAGO TAG - Monitoramento de Empacotamento"
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _mascarar(email: str) -> str:
    usuario, _, dominio = email.partition("@")
    return f"{usuario[:3]}***@{dominio}"


def _hora_leitura(extracao: Optional[ExtractionResult], timezone: str) -> str:
    if extracao is None:
        return "N/A"
    local = extracao.timestamp.astimezone(ZoneInfo(timezone))
    return local.strftime("%H:%M")


@dataclass
class ResendClient:
    """Cliente mínimo da API Resend (POST /emails)."""

    api_key: Optional[str]
    recipients: List[str] = field(default_factory=list)
    sender: Optional[str] = None
    reply_to: Optional[str] = None
    subject: Optional[str] = None
    api_url: str = RESEND_API_URL
    timeout: float = 30
    timezone: str = "America/Sao_Paulo"
    website_url: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "ResendClient":
        email_cfg = config.get("email", {})
        return cls(
            api_key=email_cfg.get("api_key"),
            recipients=list(email_cfg.get("recipients") or []),
            sender=email_cfg.get("from"),
            reply_to=email_cfg.get("reply_to"),
            subject=email_cfg.get("subject"),
            api_url=email_cfg.get("api_url") or RESEND_API_URL,
            timeout=float(email_cfg.get("timeout", 30)),
            timezone=config.timezone,
            website_url=config.get("dashboard", {}).get("website_url"),
        )

    @property
    def remetente(self) -> str:
        return self.sender or DEFAULT_SENDER

    @property
    def responder_para(self) -> str:
        return self.reply_to or DEFAULT_SENDER

    def validar(self) -> None:
        """Valida chave, remetente e destinatários.

        Raises:
            ConfigError: configuração ausente ou endereço inválido
        """
        if not self.api_key:
            raise ConfigError("RESEND_API_KEY não configurada")
        if not self.api_key.startswith("re_"):
            logger.warning("Chave Resend normalmente começa com 're_' (atual: %s...)", self.api_key[:5])
        if not self.recipients:
            raise ConfigError("Nenhum destinatário configurado (EMAIL_RECIPIENTS)")
        if not EMAIL_RE.match(self.remetente):
            raise ConfigError(f"Remetente inválido: {self.remetente}")
        if not EMAIL_RE.match(self.responder_para):
            raise ConfigError(f"Reply-to inválido: {self.responder_para}")
        for indice, destinatario in enumerate(self.recipients):
            if not EMAIL_RE.match(destinatario):
                raise ConfigError(f"Destinatário inválido na posição {indice}: {destinatario}")

    def montar_assunto(self, avaliacao: Assessment) -> str:
        base = self.subject or DEFAULT_SUBJECT
        return f"{severity_emoji(avaliacao.severity)} [{avaliacao.status}] {base}"

    def montar_mensagem(
        self,
        avaliacao: Assessment,
        extracao: Optional[ExtractionResult] = None,
        screenshot_path: Optional[Path] = None,
        verificado_em: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Monta o corpo JSON enviado à API."""
        imagem_b64 = None
        if screenshot_path is not None:
            caminho = Path(screenshot_path)
            if caminho.is_file():
                imagem_b64 = base64.b64encode(caminho.read_bytes()).decode("ascii")
            else:
                logger.warning("Screenshot não encontrado em %s", caminho)

        verificado_em = verificado_em or datetime.now(ZoneInfo(self.timezone))
        verificacao = verificado_em.astimezone(ZoneInfo(self.timezone)).strftime("%d/%m/%Y, %H:%M:%S")
        hora = _hora_leitura(extracao, self.timezone)

        aviso_fallback = ""
        texto_fallback = ""
        if extracao is not None and extracao.used_fallback:
            texto_fallback = (
                f"Atenção: não havia leitura até {extracao.target_hour:02d}:00; "
                f"foi usado o registro mais recente disponível."
            )
            aviso_fallback = f'<p style="margin: 10px 0; color: #856404; font-size: 13px;">{texto_fallback}</p>'

        link_painel = ""
        if self.website_url:
            link_painel = f'<p style="font-size: 13px;"><a href="{self.website_url}">Abrir painel</a></p>'

        bloco_imagem = ""
        if imagem_b64:
            bloco_imagem = (
                "<p><strong>Gráfico atual:</strong></p>"
                f'<img src="data:image/png;base64,{imagem_b64}" style="max-width: 100%; height: auto;" />'
            )

        html = f"""
    <html>
      <body style="font-family: Arial, sans-serif; padding: 20px;">
        <h2>Monitoramento MAGO TAG - Empacotamento</h2>
        <p style="margin: 10px 0; color: #666; font-size: 14px;">Leitura realizada às {hora} horas</p>
        {aviso_fallback}
        <div style="background-color: {severity_color(avaliacao.severity)}; padding: 15px; border-radius: 5px; margin: 20px 0;">
          <h3 style="margin: 0; color: white;">{avaliacao.status}</h3>
          <p style="margin: 10px 0 0 0; color: white; font-size: 18px;">{avaliacao.message}</p>
        </div>
        {bloco_imagem}
        {link_painel}
        <p style="margin-top: 20px; color: #666; font-size: 12px;">
          Verificação automática realizada em {verificacao}
        </p>
      </body>
    </html>
"""

        linhas_texto = [
            "Monitoramento MAGO TAG - Empacotamento",
            "",
            f"Leitura realizada às {hora} horas",
            "",
        ]
        if texto_fallback:
            linhas_texto.extend([texto_fallback, ""])
        linhas_texto.extend([
            avaliacao.status,
            avaliacao.message,
            "",
            f"Verificação automática realizada em {verificacao}",
        ])

        return {
            "to": list(self.recipients),
            "from": self.remetente,
            "reply_to": self.responder_para,
            "subject": self.montar_assunto(avaliacao),
            "text": "\n".join(linhas_texto),
            "html": html,
            "attachments": (
                [{"filename": "grafico.png", "content": imagem_b64, "type": "image/png"}]
                if imagem_b64 else []
            ),
        }

    def enviar(
        self,
        avaliacao: Assessment,
        extracao: Optional[ExtractionResult] = None,
        screenshot_path: Optional[Path] = None,
    ) -> Optional[str]:
        """Valida a configuração e envia o e-mail.

        Returns:
            ID da mensagem retornado pela Resend (quando presente)

        Raises:
            ConfigError: configuração inválida
            NotificationError: falha de rede ou resposta não-2xx da API
        """
        self.validar()
        mensagem = self.montar_mensagem(avaliacao, extracao, screenshot_path)

        logger.info(
            "Enviando e-mail para %d destinatário(s): %s",
            len(self.recipients),
            ", ".join(_mascarar(r) for r in self.recipients),
        )
        try:
            response = requests.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=mensagem,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise NotificationError(f"Erro de rede ao conectar à Resend: {exc}") from exc

        try:
            corpo = response.json()
        except ValueError:
            corpo = {}
        if not isinstance(corpo, dict):
            corpo = {}

        if not response.ok:
            detalhe = corpo.get("message") or corpo.get("error") or "Erro desconhecido da API Resend"
            raise NotificationError(
                f"Resend API request failed ({response.status_code}): {detalhe}",
                status_code=response.status_code,
                response=corpo,
            )

        message_id = corpo.get("id")
        logger.info("E-mail enviado (Resend ID: %s)", message_id or "-")
        return message_id


__all__ = ["RESEND_API_URL", "DEFAULT_SENDER", "DEFAULT_SUBJECT", "ResendClient"]

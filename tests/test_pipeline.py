#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Testes para o orquestrador Pipeline."""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mago_monitor.config.loader import ENV_OVERRIDES, ConfigLoader
from mago_monitor.core.exceptions import ConfigError, NoActualSeriesFound
from mago_monitor.pipeline import Pipeline

CSV = (
    "Informação,Data,Valor\n"
    'Empacotamento,"06/12/2025, 14:00:00",71000000\n'
    'Previsão,"06/12/2025, 14:00:00",60000000\n'
)


@pytest.fixture
def projeto(tmp_path, monkeypatch):
    for variavel in ENV_OVERRIDES:
        monkeypatch.delenv(variavel, raising=False)
    (tmp_path / "config.yaml").write_text(
        "email:\n  recipients: [equipe@exemplo.com]\n  api_key: re_abc\n",
        encoding="utf-8",
    )
    arquivo = tmp_path / "export.csv"
    arquivo.write_text(CSV, encoding="utf-8")
    return tmp_path, arquivo


class TestPipeline:
    """Testes para Pipeline."""

    def test_config_carregada_uma_vez(self, projeto):
        base, _ = projeto
        loader = Mock(wraps=ConfigLoader(base_path=base))
        loader.base_path = base
        pipeline = Pipeline(loader=loader)

        pipeline._get_config()
        pipeline._get_config()

        assert loader.load.call_count == 1

    def test_extract_de_arquivo(self, projeto):
        base, arquivo = projeto
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))

        resultado = pipeline.extract(datetime(2025, 12, 6, 15, 5), arquivo)

        assert resultado.value == 71_000_000
        assert resultado.hour == 14

    def test_assess_usa_limites_da_config(self, projeto, monkeypatch):
        base, arquivo = projeto
        monkeypatch.setenv("CRITICO_PUT", "75000000")
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))

        avaliacao = pipeline.assess(pipeline.extract(datetime(2025, 12, 6, 15, 5), arquivo))

        assert avaliacao.status == "Alerta PUT"

    def test_run_sem_envio(self, projeto):
        base, arquivo = projeto
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))

        with patch("mago_monitor.utils.resend_client.requests.post") as mock_post:
            resultado = pipeline.run(datetime(2025, 12, 6, 15, 5), arquivo, enviar=False)

        mock_post.assert_not_called()
        assert resultado.enviado is False
        assert resultado.avaliacao.status == "Crítico PUT"

    def test_run_completo_envia_email(self, projeto):
        base, arquivo = projeto
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))
        resposta = Mock(ok=True, status_code=200)
        resposta.json.return_value = {"id": "msg-9"}

        with patch("mago_monitor.utils.resend_client.requests.post", return_value=resposta) as mock_post:
            resultado = pipeline.run(datetime(2025, 12, 6, 15, 5), arquivo)

        assert resultado.enviado is True
        assert resultado.message_id == "msg-9"
        enviado = mock_post.call_args.kwargs["json"]
        assert enviado["to"] == ["equipe@exemplo.com"]
        assert "[Crítico PUT]" in enviado["subject"]

    def test_notify_sem_chave_falha(self, projeto, monkeypatch):
        base, arquivo = projeto
        (base / "config.yaml").write_text("email:\n  recipients: [equipe@exemplo.com]\n", encoding="utf-8")
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))

        with pytest.raises(ConfigError):
            pipeline.run(datetime(2025, 12, 6, 15, 5), arquivo)

    def test_erro_de_extracao_propaga(self, projeto):
        base, _ = projeto
        arquivo = base / "so_previsao.csv"
        arquivo.write_text("Informação,Data,Valor\n" 'Previsão,"06/12/2025, 14:00:00",1\n', encoding="utf-8")
        pipeline = Pipeline(loader=ConfigLoader(base_path=base))

        with pytest.raises(NoActualSeriesFound):
            pipeline.extract(datetime(2025, 12, 6, 15, 5), arquivo)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

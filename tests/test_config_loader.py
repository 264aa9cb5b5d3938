#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Testes para o carregamento de configuração."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mago_monitor.config.loader import ENV_OVERRIDES, ConfigLoader, parse_recipients
from mago_monitor.core.exceptions import ConfigError
from mago_monitor.core.models import ThresholdSet


@pytest.fixture(autouse=True)
def ambiente_limpo(monkeypatch):
    for variavel in ENV_OVERRIDES:
        monkeypatch.delenv(variavel, raising=False)


class TestConfigLoader:
    """Testes para ConfigLoader."""

    def test_sem_arquivo_usa_padroes(self, tmp_path):
        config = ConfigLoader(base_path=tmp_path).load()
        assert config.source is None
        assert config.thresholds() == ThresholdSet()
        assert config.timezone == "America/Sao_Paulo"
        assert config.get("email")["recipients"] == []

    def test_yaml_sobrescreve_padroes(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "thresholds:\n  critico_put: 80000000\nemail:\n  recipients: [a@b.com]\n",
            encoding="utf-8",
        )
        config = ConfigLoader(base_path=tmp_path).load()
        assert config.thresholds().critico_put == 80_000_000
        assert config.thresholds().alerta_put == 68_500_000
        assert config.get("email")["recipients"] == ["a@b.com"]

    def test_ambiente_sobrescreve_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("thresholds:\n  alerta_put: 1\n", encoding="utf-8")
        monkeypatch.setenv("ALERTA_PUT", "69.000.000")
        monkeypatch.setenv("EMAIL_RECIPIENTS", "x@y.com, z@w.com")
        monkeypatch.setenv("RESEND_API_KEY", "re_teste")

        config = ConfigLoader(base_path=tmp_path).load()
        assert config.thresholds().alerta_put == 69_000_000
        assert config.get("email")["recipients"] == ["x@y.com", "z@w.com"]
        assert config.get("email")["api_key"] == "re_teste"

    def test_limite_invalido(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CRITICO_CALL", "abc")
        config = ConfigLoader(base_path=tmp_path).load()
        with pytest.raises(ConfigError):
            config.thresholds()

    def test_yaml_invalido(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- apenas\n- lista\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ConfigLoader(base_path=tmp_path).load()

    def test_faixa_de_magnitude(self, tmp_path):
        config = ConfigLoader(base_path=tmp_path).load()
        assert config.magnitude_range() is None

        (tmp_path / "config.yaml").write_text(
            "dashboard:\n  magnitude_fallback:\n    enabled: true\n    min: 1\n    max: 2\n",
            encoding="utf-8",
        )
        assert ConfigLoader(base_path=tmp_path).load().magnitude_range() == (1.0, 2.0)

    def test_resolve_path_relativo(self, tmp_path):
        config = ConfigLoader(base_path=tmp_path).load()
        assert config.resolve_path("screenshot") == tmp_path / "data" / "output" / "screenshot.png"

    def test_screenshot_nao_configurado(self, tmp_path):
        (tmp_path / "config.yaml").write_text('paths:\n  screenshot: ""\n', encoding="utf-8")
        assert ConfigLoader(base_path=tmp_path).load().resolve_path("screenshot") is None

        (tmp_path / "config.yaml").write_text("paths:\n  screenshot: null\n", encoding="utf-8")
        assert ConfigLoader(base_path=tmp_path).load().resolve_path("screenshot") is None


class TestParseRecipients:
    """Testes para parse_recipients."""

    def test_virgula(self):
        assert parse_recipients("a@b.com,c@d.com") == ["a@b.com", "c@d.com"]

    def test_json(self):
        assert parse_recipients('["a@b.com", "c@d.com"]') == ["a@b.com", "c@d.com"]

    def test_vazios(self):
        assert parse_recipients(None) == []
        assert parse_recipients("  ") == []
        assert parse_recipients(["a@b.com", ""]) == ["a@b.com"]

    def test_json_invalido(self):
        with pytest.raises(ConfigError):
            parse_recipients("[a@b.com")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

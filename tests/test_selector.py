#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Testes para o seletor do valor oficial."""

import sys
from datetime import date, datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mago_monitor.core.exceptions import NoActualSeriesFound
from mago_monitor.core.record_parser import build_record
from mago_monitor.core.selector import select


def _registro(tag, hora, valor, qualidade=None, dia=6, minuto=0):
    return build_record(tag, datetime(2025, 12, dia, hora, minuto), valor, qualidade)


class TestSelect:
    """Testes para select."""

    def test_escolhe_mais_recente_ate_hora_alvo(self):
        candidatos = [
            _registro("Empacotamento", 13, 65_000_000),
            _registro("Empacotamento", 14, 66_500_000),
            _registro("Empacotamento", 15, 67_800_000),
        ]
        resultado = select(candidatos, 14)
        assert resultado.value == 66_500_000
        assert resultado.used_fallback is False

    def test_ignora_previsao_e_desconhecidos(self):
        candidatos = [
            _registro("Previsão Empacotamento", 14, 70_000_000),
            _registro("RANDOM-TAG", 14, 71_000_000),
            _registro("Empacotamento", 12, 64_500_000),
        ]
        assert select(candidatos, 14).value == 64_500_000

    def test_sem_serie_real_lanca_erro(self):
        candidatos = [_registro("PREVISAO", 14, 70_000_000), _registro("RANDOM", 14, 1)]
        with pytest.raises(NoActualSeriesFound) as exc_info:
            select(candidatos, 14)
        assert exc_info.value.total_candidatos == 2

    def test_fallback_para_mais_recente(self):
        candidatos = [
            _registro("Empacotamento", 20, 66_000_000),
            _registro("Empacotamento", 21, 66_100_000),
        ]
        resultado = select(candidatos, 10)
        assert resultado.value == 66_100_000
        assert resultado.used_fallback is True

    def test_qualidade_desempata_mesmo_timestamp(self):
        candidatos = [
            _registro("Empacotamento", 14, 1.0, qualidade=None),
            _registro("Empacotamento", 14, 2.0, qualidade=True),
            _registro("Empacotamento", 14, 3.0, qualidade=False),
        ]
        assert select(candidatos, 14).value == 2.0

    def test_qualidade_nao_vence_timestamp_mais_novo(self):
        candidatos = [
            _registro("Empacotamento", 13, 1.0, qualidade=True),
            _registro("Empacotamento", 14, 2.0, qualidade=False),
        ]
        assert select(candidatos, 14).value == 2.0

    def test_minutos_dentro_da_hora(self):
        """Registro 14:30 pertence à hora 14 e vence o de 14:00."""
        candidatos = [
            _registro("Empacotamento", 14, 1.0),
            _registro("Empacotamento", 14, 2.0, minuto=30),
        ]
        assert select(candidatos, 14).value == 2.0

    def test_idempotente(self):
        candidatos = [
            _registro("Empacotamento", 14, 66_500_000),
            _registro("Empacotamento", 15, 67_800_000),
        ]
        assert select(candidatos, 14).value == select(candidatos, 14).value

    def test_dia_alvo_na_virada(self):
        """Com dia alvo, 00:00 do dia seguinte não entra na hora 23."""
        candidatos = [
            _registro("Empacotamento", 23, 66_000_000, dia=6),
            _registro("Empacotamento", 0, 67_000_000, dia=7),
        ]
        resultado = select(candidatos, 23, target_date=date(2025, 12, 6))
        assert resultado.value == 66_000_000
        assert resultado.used_fallback is False

    def test_dia_anterior_conta_como_ate_a_hora_alvo(self):
        """Com dia alvo, 20h de ontem é anterior a 10h de hoje: não é fallback."""
        candidatos = [
            _registro("Empacotamento", 20, 66_000_000, dia=5),
            _registro("Empacotamento", 11, 67_000_000, dia=6),
        ]
        resultado = select(candidatos, 10, target_date=date(2025, 12, 6))
        assert resultado.value == 66_000_000
        assert resultado.used_fallback is False

        sem_dia = select(candidatos, 10)
        assert sem_dia.value == 67_000_000
        assert sem_dia.used_fallback is True


class TestFallbackPorMagnitude:
    """Testes para a faixa de valores opcional."""

    def test_desligado_por_padrao(self):
        with pytest.raises(NoActualSeriesFound):
            select([_registro("TAG-X", 14, 66_000_000)], 14)

    def test_aceita_desconhecido_dentro_da_faixa(self):
        candidatos = [
            _registro("TAG-X", 14, 66_000_000),
            _registro("TAG-Y", 14, 10),
        ]
        resultado = select(candidatos, 14, magnitude_range=(50_000_000, 80_000_000))
        assert resultado.value == 66_000_000
        assert resultado.used_fallback is True

    def test_nunca_aceita_previsao(self):
        candidatos = [_registro("Previsão", 14, 66_000_000)]
        with pytest.raises(NoActualSeriesFound):
            select(candidatos, 14, magnitude_range=(50_000_000, 80_000_000))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

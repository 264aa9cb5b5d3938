#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Testes para o cálculo da última hora completa."""

import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mago_monitor.core.time_bucket import last_complete_bucket, last_complete_hour


class TestLastCompleteHour:
    """Testes para last_complete_hour."""

    @pytest.mark.parametrize("hora", range(24))
    def test_minuto_zero_retorna_hora_corrente(self, hora):
        """No minuto 0 a hora corrente já está completa."""
        assert last_complete_hour(datetime(2025, 12, 6, hora, 0, 0)) == hora

    @pytest.mark.parametrize("hora", range(1, 24))
    def test_minuto_positivo_retorna_hora_anterior(self, hora):
        """Com minuto > 0 retorna a hora anterior."""
        assert last_complete_hour(datetime(2025, 12, 6, hora, 5, 0)) == hora - 1

    def test_meia_noite_e_quinze_volta_para_23(self):
        """00:15 -> 23h do dia anterior."""
        assert last_complete_hour(datetime(2025, 12, 7, 0, 15)) == 23

    def test_minuto_zero_com_segundos_completa_a_hora(self):
        """15:00:30 ainda conta a hora 15 como completa (minuto 0)."""
        assert last_complete_hour(datetime(2025, 12, 6, 15, 0, 30)) == 15


class TestLastCompleteBucket:
    """Testes para last_complete_bucket (dia + hora)."""

    def test_meia_noite_retorna_dia_anterior(self):
        """00:15 de 07/12 -> (06/12, 23)."""
        assert last_complete_bucket(datetime(2025, 12, 7, 0, 15)) == (date(2025, 12, 6), 23)

    def test_instante_aware_convertido_para_fuso_do_painel(self):
        """18:05 UTC = 15:05 em São Paulo -> hora 14."""
        now = datetime(2025, 12, 6, 18, 5, tzinfo=ZoneInfo("UTC"))
        assert last_complete_bucket(now) == (date(2025, 12, 6), 14)

    def test_naive_ja_e_horario_local(self):
        """Instante naive não sofre conversão."""
        assert last_complete_bucket(datetime(2025, 12, 6, 18, 5)) == (date(2025, 12, 6), 17)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

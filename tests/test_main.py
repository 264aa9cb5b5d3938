#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Testes para a CLI."""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import main


class TestBuildParser:
    """Testes para build_parser."""

    def test_extract_com_opcoes(self):
        args = main.build_parser().parse_args(
            ["--no-wait", "extract", "--now", "2025-12-06T15:05", "--arquivo", "export.csv"]
        )
        assert args.no_wait is True
        assert args.command == "extract"
        assert args.now == datetime(2025, 12, 6, 15, 5)
        assert args.arquivo == Path("export.csv")

    def test_notify_e_alias_de_run(self):
        args = main.build_parser().parse_args(["notify"])
        assert args.command == "notify"
        assert args.now is None

    def test_now_invalido(self):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args(["extract", "--now", "ontem"])

    def test_comando_obrigatorio(self):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args([])


class TestExecutePipeline:
    """Testes para _execute_pipeline com Pipeline mockado."""

    @patch("main.Pipeline")
    def test_extract_nao_avalia(self, mock_pipeline):
        args = argparse.Namespace(command="extract", now=None, arquivo=None)
        main._execute_pipeline(args)

        instancia = mock_pipeline.return_value
        instancia.extract.assert_called_once_with(None, None)
        instancia.run.assert_not_called()

    @patch("main.print_section")
    @patch("main.Pipeline")
    def test_assess_nao_envia(self, mock_pipeline, _mock_print):
        resultado = mock_pipeline.return_value.run.return_value
        resultado.extracao.value = 66_500_000
        resultado.extracao.hour = 14
        resultado.enviado = False

        main._execute_pipeline(argparse.Namespace(command="assess", now=None, arquivo=None))

        mock_pipeline.return_value.run.assert_called_once_with(None, None, enviar=False)

    @patch("main.print_section")
    @patch("main.Pipeline")
    def test_run_envia(self, mock_pipeline, _mock_print):
        resultado = mock_pipeline.return_value.run.return_value
        resultado.extracao.value = 66_500_000
        resultado.extracao.hour = 14

        main._execute_pipeline(argparse.Namespace(command="run", now=None, arquivo=None))

        mock_pipeline.return_value.run.assert_called_once_with(None, None, enviar=True)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

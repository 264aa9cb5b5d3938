import argparse
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from mago_monitor.config.loader import ConfigLoader
from mago_monitor.pipeline import Pipeline
from mago_monitor.utils.console_runner import run_with_console
from mago_monitor.utils.helpers import formatar_numero_br, print_section
from mago_monitor.utils.logger_config import setup_logging


BASE_DIR = Path(__file__).resolve().parent
ENV_FILE = BASE_DIR / ".env"


if ENV_FILE.exists():
    load_dotenv(ENV_FILE)


def _parse_now(valor: str) -> datetime:
    try:
        return datetime.fromisoformat(valor)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Data/hora inválida (use ISO, ex: 2025-01-15T14:30): {valor}") from exc


def build_parser() -> argparse.ArgumentParser:
    comum = argparse.ArgumentParser(add_help=False)
    comum.add_argument("--now", type=_parse_now, default=None,
                       help="Instante de referencia (ISO 8601); padrao: agora")
    comum.add_argument("--arquivo", type=Path, default=None,
                       help="Usa um CSV/JSON salvo em disco em vez de baixar o export")

    parser = argparse.ArgumentParser(prog="python main.py", description="Monitor MAGO TAG - Empacotamento")

    # Argumento global para desabilitar espera
    parser.add_argument('--no-wait', action='store_true',
                        help='Nao aguarda antes de fechar o console')

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("extract", parents=[comum], help="Extrai o valor da ultima hora completa")
    subparsers.add_parser("assess", parents=[comum], help="Extrai e classifica o valor (sem e-mail)")
    subparsers.add_parser("run", aliases=["notify"], parents=[comum],
                          help="Fluxo completo: extrai, classifica e envia o e-mail")

    return parser


def _execute_pipeline(args: argparse.Namespace) -> None:
    """Executa o pipeline conforme os argumentos."""
    loader = ConfigLoader(base_path=BASE_DIR)
    pipeline = Pipeline(loader=loader)

    if args.command == "extract":
        pipeline.extract(args.now, args.arquivo)
        return

    resultado = pipeline.run(args.now, args.arquivo, enviar=args.command in {"run", "notify"})
    linhas = [
        f"Valor: {formatar_numero_br(resultado.extracao.value)}",
        f"Hora: {resultado.extracao.hour:02d}:00",
        f"Status: {resultado.avaliacao.status}",
        resultado.avaliacao.message,
    ]
    if resultado.enviado:
        linhas.append(f"E-mail enviado (ID: {resultado.message_id or '-'})")
    print_section("RESULTADO", linhas)


def main(argv: list[str] | None = None) -> None:
    """Funcao principal com console runner."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Se --no-wait, executar diretamente sem console runner
    if args.no_wait:
        setup_logging(BASE_DIR / "data" / "logs")
        try:
            _execute_pipeline(args)
        except KeyboardInterrupt:
            print("\n Execucao interrompida pelo usuario")
            sys.exit(1)
        except Exception as e:
            print(f"\n Erro na execucao: {e}")
            sys.exit(1)
    else:
        exit_code = run_with_console(
            project_name="MAGO TAG",
            base_dir=BASE_DIR,
            pipeline_func=lambda: _execute_pipeline(args),
            wait_time=300,
        )
        sys.exit(exit_code)


if __name__ == "__main__":
    main()

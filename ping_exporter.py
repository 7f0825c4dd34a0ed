import argparse
import logging
import sys

from rich.console import Console

from config import SETTINGS as env_settings
from config import load_endpoints
from errors import ExporterError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ping-exporter",
        description="Probe endpoints with ping and expose Prometheus metrics.",
    )
    parser.add_argument("-c", "--config", default=env_settings.CONFIG_FILE,
                        help=f"endpoint YAML file (default: {env_settings.CONFIG_FILE})")
    parser.add_argument("--addr", default=env_settings.METRICS_ADDR,
                        help=f"metrics bind address (default: {env_settings.METRICS_ADDR})")
    parser.add_argument("-p", "--port", type=int, default=env_settings.METRICS_PORT,
                        help=f"metrics port (default: {env_settings.METRICS_PORT})")
    parser.add_argument("--log-level", default=env_settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        type=str.upper)
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {env_settings.VERSION}")
    return parser.parse_args(argv)


def _setup_logging(level: str, log_file: str) -> None:
    kwargs = {}
    if log_file:
        kwargs = {"filename": log_file, "filemode": "a", "encoding": "utf-8"}
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(message)s",
        **kwargs,
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = env_settings.model_copy(update={
        "CONFIG_FILE": args.config,
        "METRICS_ADDR": args.addr,
        "METRICS_PORT": args.port,
        "LOG_LEVEL": args.log_level,
    })
    _setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    from main import main as run_exporter  # type: ignore

    console = Console(stderr=True)
    try:
        endpoints = load_endpoints(settings.CONFIG_FILE)
        run_exporter(endpoints, settings)
    except (ExporterError, OSError) as exc:
        logging.critical(f"Startup failed: {exc}")
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Application entry point — wires settings, logging and the parser behind a CLI.

Composition root: this is the ONLY place where settings are loaded, logging
is configured and the concrete decoder is instantiated.

Responsibilities:
  1. Load and validate configuration from environment/.env
  2. Configure structlog (console renderer on stderr, stdout stays clean)
  3. Read the container file named on the command line (or PFX__PATH)
  4. Run the pipeline and print the record as JSON or a short summary

Exit codes: 0 parsed, 1 configuration or I/O error, 2 container could not be decoded.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from pfx_parser import __version__
from pfx_parser.adapters.pkcs12_decoder import Pkcs12ContainerDecoder
from pfx_parser.config import AppSettings
from pfx_parser.domain.cnpj import format_cnpj
from pfx_parser.domain.errors import DecodeError
from pfx_parser.domain.models import ParsedCertificate
from pfx_parser.domain.status import certificate_status
from pfx_parser.pipeline import run_pipeline

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_DECODE_ERROR = 2


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured, human-readable console logging.

    Logs go to stderr so that --json output on stdout can be piped.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _render_summary(parsed: ParsedCertificate, expiring_soon_days: int) -> str:
    status = certificate_status(parsed, expiring_soon_days=expiring_soon_days)
    days = parsed.validity.days_remaining
    remaining = f"{days} days remaining" if days >= 0 else f"expired {abs(days)} days ago"
    lines = [
        f"Subject:      {parsed.subject.cn}",
        f"Organization: {parsed.subject.o}",
        f"Issuer:       {parsed.issuer.cn} ({parsed.issuer.o})",
        f"Valid from:   {parsed.validity.not_before.isoformat()}",
        f"Valid until:  {parsed.validity.not_after.isoformat()}",
        f"Status:       {status.value} ({remaining})",
        f"CNPJ:         {format_cnpj(parsed.cnpj) if parsed.cnpj else '-'}",
        f"ICP-Brasil:   {'yes' if parsed.is_icp_brasil else 'no'}",
        f"Serial:       {parsed.serial_number}",
        f"SHA-1:        {parsed.fingerprint}",
    ]
    return "\n".join(lines)


@click.command(name="pfx-parser")
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--password",
    "-p",
    default=None,
    help="Container password (defaults to PFX__PASSWORD; empty for unprotected files).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the parsed record as JSON.")
@click.version_option(__version__)
def cli(path: Path | None, password: str | None, as_json: bool) -> None:
    """Read a PKCS#12 (.pfx/.p12) certificate container and print its identity and validity."""
    try:
        settings = AppSettings()
    except ValidationError as e:
        click.echo(f"FATAL: Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    path = path or settings.pfx.path
    if path is None:
        click.echo("FATAL: no container given (pass PATH or set PFX__PATH)", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    if password is None:
        password = settings.pfx.password.get_secret_value()

    try:
        data = path.read_bytes()
    except OSError as e:
        log.error("app.read_failed", path=str(path), error=str(e))
        sys.exit(EXIT_CONFIG_ERROR)

    result = run_pipeline(data, password, decoder=Pkcs12ContainerDecoder())
    if result.is_failure():
        error = DecodeError.from_failure(result.error())
        click.echo(f"{error.kind.value}: {error.message}", err=True)
        sys.exit(EXIT_DECODE_ERROR)

    parsed = result.value()
    if as_json:
        record = parsed.to_dict()
        record["status"] = certificate_status(parsed, settings.expiring_soon_days).value
        click.echo(json.dumps(record, indent=2, ensure_ascii=False))
    else:
        click.echo(_render_summary(parsed, settings.expiring_soon_days))


def main() -> None:
    """Console-script entry point."""
    cli()


if __name__ == "__main__":
    main()

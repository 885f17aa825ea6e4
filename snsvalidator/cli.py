"""Command line interface for validating SNS messages."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from snsvalidator.certs import CertificateFetcher
from snsvalidator.config import load_config
from snsvalidator.contracts import SNSMessage
from snsvalidator.errors import SNSError
from snsvalidator.signable import build_signable_bytes

app = typer.Typer(help="Validate AWS SNS messages without the AWS SDK")


def _read_message(path: Optional[Path]) -> SNSMessage:
    if path is None or str(path) == "-":
        raw = sys.stdin.buffer.read()
    else:
        if not path.exists():
            typer.secho(f"File not found: {path}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        raw = path.read_bytes()
    return SNSMessage.from_json(raw)


def _fail(exc: SNSError) -> None:
    typer.secho(f"{exc.kind}: {exc.message}", fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """SNS message validator entry point."""
    pass


@app.command("validate")
def validate(
    path: Optional[Path] = typer.Argument(
        None, help="JSON message file; reads stdin when omitted or '-'"
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="YAML configuration file"
    ),
    timeout: Optional[float] = typer.Option(
        None, help="Certificate download timeout in seconds"
    ),
) -> None:
    """
    Validate the structure and signature of an SNS message.

    The signing certificate is downloaded from the message's SigningCertURL,
    which must be an HTTPS URL on an SNS host.

    Example:
        snsvalidator validate notification.json
        cat notification.json | snsvalidator validate --timeout 5
    """
    try:
        config = load_config(config_path)
        logging.basicConfig(level=config.log_level)
    except ValueError as exc:
        typer.secho(f"Invalid configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if timeout is not None:
        config.certificates.timeout = timeout

    try:
        message = _read_message(path)
        message.get_validator(CertificateFetcher.from_config(config)).validate_message()
    except SNSError as exc:
        _fail(exc)

    typer.secho("Message is valid", fg=typer.colors.GREEN)


@app.command("signable")
def signable(
    path: Optional[Path] = typer.Argument(
        None, help="JSON message file; reads stdin when omitted or '-'"
    ),
) -> None:
    """Print the canonical string SNS signed for the message."""
    try:
        message = _read_message(path)
    except SNSError as exc:
        _fail(exc)

    typer.echo(build_signable_bytes(message.to_field_map()).decode("utf-8"), nl=False)


if __name__ == "__main__":  # pragma: no cover
    app()

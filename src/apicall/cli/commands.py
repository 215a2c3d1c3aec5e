"""CLI commands for apicall.

``apicall METHOD URL`` sends one request through :class:`HttpxApiCall` and
prints the response body. Exchanges are logged to stderr so stdout only
carries the body.
"""

from __future__ import annotations

import json
import logging
import sys
import typing as _t
from pathlib import Path

import click
import httpx
from dotenv import load_dotenv

from .. import version
from ..config import LogStyle, get_config
from ..http.call import HttpxApiCall
from ..http.errors import HttpApiCallError
from ..http.loggers import HttpLogging, LoggerHttpLogging, StdoutHttpLogging
from ..http.request import HttpMethod, HttpRequest

__all__ = [
    "cli",
    "main",
]

# Load environment variables
load_dotenv()


def parse_header(value: str) -> tuple[str, str]:
    """Split a ``Name: value`` header argument."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise click.BadParameter(f"Header must look like 'Name: value', got '{value}'")
    return name.strip(), header_value.strip()


def parse_body(data: str | None) -> _t.Any | None:
    """Use ``data`` as JSON when it parses, otherwise send it as raw text."""
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return data


def make_http_logging(log_style: LogStyle) -> HttpLogging:
    if log_style == LogStyle.LOGGER:
        return LoggerHttpLogging()
    return StdoutHttpLogging(stream=sys.stderr)


@click.command()
@click.version_option(version=version, prog_name="apicall")
@click.option("-H", "--header", "headers", multiple=True, help="Request header as 'Name: value' (repeatable)")
@click.option("-d", "--data", help="Request body; JSON is sent as JSON, anything else as text")
@click.option("--config-file", type=click.Path(exists=True, path_type=Path), help="Specify custom config file path")
@click.option(
    "--log-style",
    type=click.Choice([style.value for style in LogStyle], case_sensitive=False),
    help="How exchanges are logged (overrides config)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.argument("method", type=click.Choice([m.value for m in HttpMethod], case_sensitive=False))
@click.argument("url")
def cli(
    method: str,
    url: str,
    headers: tuple[str, ...],
    data: str | None,
    config_file: Path | None,
    log_style: str | None,
    verbose: bool,
) -> None:
    """Send one HTTP request and print the response body."""
    try:
        config = get_config(config_file)
    except ValueError as e:
        raise click.ClickException(str(e))

    if log_style:
        config = config.model_copy(update={"log_style": LogStyle(log_style)})

    logging.basicConfig(level=logging.DEBUG if verbose or config.debug else config.log_level)

    request = HttpRequest(
        method=method,
        url=url,
        header=dict(parse_header(h) for h in headers),
        body=parse_body(data),
    )

    try:
        with HttpxApiCall(http_logging=make_http_logging(config.log_style), config=config) as api_call:
            body = api_call.call(request)
    except HttpApiCallError as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)
    except httpx.RequestError as e:
        click.echo(f"[ERROR] {method} {url} failed: {e}", err=True)
        sys.exit(1)

    click.echo(body)


def main() -> None:
    """Main entry point for the CLI."""
    cli()

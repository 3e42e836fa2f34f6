"""
This file is the entry point for the 'aurora' command-line tool.
Run 'aurora --help' in your shell to use the CLI.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import typer

from common.app_setup import print_error, setup_logging
from orchestrator.client import create_orchestrator
from orchestrator.errors import InstanceError
from orchestrator.models import RequestResult, load_config

app = typer.Typer(add_completion=False, help="Issue HTTP requests through the Aurora request orchestrator.")


@app.callback()
def main(
    log_level: str = typer.Option("INFO", help="Logging level (DEBUG, INFO, WARNING...)"),
    log_file: Path | None = typer.Option(None, help="Log file (default: ~/.aurora/log.txt)"),
):
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    setup_logging(app_name="aurora", loglevel=level, logfile=str(log_file) if log_file else None)


def _parse_pairs(items: list[str] | None, separator: str, what: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in items or []:
        if separator not in item:
            raise typer.BadParameter(f"Expected KEY{separator}VALUE, got {item!r}", param_hint=what)
        key, value = item.split(separator, 1)
        pairs[key.strip()] = value.strip()
    return pairs


def _parse_body(data: str | None) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return data


def _result_payload(result: RequestResult) -> dict[str, Any]:
    if result.has_error:
        return {"has_error": True, "error": result.error.model_dump(mode="json")}
    response = result.response
    content_type = response.headers.get("content-type", "")
    body = response.json() if "json" in content_type and response.content else response.text
    return {
        "has_error": False,
        "status": response.status_code,
        "headers": dict(response.headers),
        "body": body,
    }


async def _issue(method: str, config: Any, overrides: dict[str, Any], options: dict[str, Any]) -> RequestResult:
    async with create_orchestrator(config, **overrides) as api:
        return await api.call(method, options)


@app.command()
def request(
    method: str = typer.Argument(..., help="HTTP method (get, post, put, delete...)"),
    endpoint: str = typer.Argument("", help="Endpoint joined with the base URL"),
    base_url: str | None = typer.Option(None, "--base-url", "-b", help="Base URL (overrides the config file)"),
    header: list[str] | None = typer.Option(None, "--header", "-H", help="Header as 'Name: value', repeatable"),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Query parameter as 'key=value', repeatable"),
    data: str | None = typer.Option(None, "--data", "-d", help="Request body, sent as JSON if it parses"),
    timeout: int | None = typer.Option(None, help="Timeout in milliseconds"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML/JSON client config"),
):
    """Send one request and print the result as JSON. Exits with 1 if the request failed."""
    overrides: dict[str, Any] = {}
    if base_url is not None:
        overrides["base_url"] = base_url
    options: dict[str, Any] = {
        "endpoint": endpoint,
        "headers": _parse_pairs(header, ":", "--header"),
        "params": _parse_pairs(param, "=", "--param"),
    }
    body = _parse_body(data)
    if body is not None:
        options["body"] = body
    if timeout is not None:
        options["timeout"] = timeout

    try:
        result = asyncio.run(_issue(method, config, overrides, options))
    except InstanceError as e:
        print_error(f"Request not sent: {e}")
        raise typer.Exit(2)

    typer.echo(json.dumps(_result_payload(result), indent=2))
    if result.has_error:
        raise typer.Exit(1)


@app.command()
def show_config(config: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML/JSON client config")):
    """Validate a client config file and print it as JSON."""
    try:
        client_config = load_config(config)
    except InstanceError as e:
        print_error(str(e))
        raise typer.Exit(1)
    typer.echo(client_config.model_dump_json(indent=2))


if __name__ == "__main__":
    app()

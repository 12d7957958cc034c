import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
import uvicorn
from anthropic import APIError
from pydantic import ValidationError
from rich import print
from rich.logging import RichHandler

from .api import create_asgi_app, create_relay_app
from .artifacts import save_json_error, save_run
from .catalog import FLOWS, Flow
from .config import Settings
from .llm import InvalidModelJSON, MissingCredentials
from .speech import SpeechSynthesisError

app = typer.Typer()


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Eduko backend: study flows and the Live Mode signalling relay."""
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit(code=0)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )


def _load_settings() -> Settings:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=1)
    _configure_logging(settings.log_level)
    return settings


def _resolve_flow(name: str) -> Flow:
    flow = FLOWS.get(name)
    if flow is None:
        print(f"[red]Unknown flow '{name}'.[/red] Run [bold]eduko flows[/bold] to list them.")
        raise typer.Exit(code=2)
    return flow


def _read_input(file: Path) -> Any:
    if not file.exists():
        print("[red]File not found[/red]")
        raise typer.Exit(code=1)
    try:
        return json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"[red]Input is not valid JSON:[/red] {exc}")
        raise typer.Exit(code=2)


def _handle_invalid_json(exc: InvalidModelJSON, runs_dir: str) -> None:
    failure_messages = {
        "json_decode": "Model returned invalid JSON",
        "schema_validation": "Model returned JSON that didn't match schema",
        "empty_output": "Model returned empty output",
    }
    message = failure_messages.get(exc.kind, "Model output validation failed")
    error_path = save_json_error(exc.raw_text, exc.error, exc.kind, runs_dir=runs_dir)
    print(f"[red]{message}.[/red] Saved error artifact to [bold]{error_path}[/bold].")
    raise typer.Exit(code=1)


@app.command("flows")
def list_flows():
    """List the available flows."""
    for flow in FLOWS.values():
        print(f"[bold]{flow.name}[/bold]  {flow.description}")


@app.command()
def run(
    flow_name: str = typer.Argument(..., metavar="FLOW"),
    file: Path = typer.Argument(..., help="JSON file with the flow input."),
):
    """Run one flow against a JSON input file."""
    flow = _resolve_flow(flow_name)
    settings = _load_settings()

    try:
        data = flow.input_model.model_validate(_read_input(file))
    except ValidationError as exc:
        print("[red]Invalid input:[/red]")
        print(str(exc))
        raise typer.Exit(code=2)

    try:
        result = flow.run(data, settings=settings)
    except InvalidModelJSON as exc:
        _handle_invalid_json(exc, settings.runs_dir)
    except (MissingCredentials, SpeechSynthesisError, APIError) as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    paths = save_run(flow.name, result.raw, result.output, runs_dir=settings.runs_dir)
    print(result.output.model_dump(by_alias=True))
    print(f"Saved result to [bold]{paths['result_path']}[/bold]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default EDUKO_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", help="Listening port (default PORT)."),
):
    """Serve the HTTP flows and the signalling relay together."""
    settings = _load_settings()
    uvicorn.run(
        create_asgi_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


@app.command()
def relay(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default EDUKO_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", help="Listening port (default PORT)."),
):
    """Serve only the signalling relay."""
    settings = _load_settings()
    logging.getLogger(__name__).info("Signalling server listening on %s", port or settings.port)
    uvicorn.run(
        create_relay_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    app()

"""CLI application entrypoint built with Typer."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from .config import CONFIG_PATH_VAR, load_collaborator_config, load_run_config
from .dispatcher import Dispatcher
from .exceptions import CollaboratorError, CollaboratorLaunchError, ConfigurationError
from .invocations import plan_invocation
from .logging import LOG_FORMATS, configure_logging
from .models import CollaboratorConfig, RunConfig

app = typer.Typer(help="Nightly CI entrypoint: run the build or integration suite selected by KIND")


def _fail_config(exc: ConfigurationError) -> None:
    typer.secho(f"[error] {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=exc.exit_code)


def _resolve(ctx: typer.Context) -> tuple[RunConfig, CollaboratorConfig]:
    options = ctx.obj
    try:
        collaborators = load_collaborator_config(options["config"])
        run_config = load_run_config(os.environ, strict=options["strict"])
    except ConfigurationError as exc:
        _fail_config(exc)
    return run_config, collaborators


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        envvar=CONFIG_PATH_VAR,
        help="Path to a TOML file overriding collaborator locations.",
    ),
    strict: bool = typer.Option(
        True,
        "--strict/--no-strict",
        help="Treat an unset KIND as a configuration error.",
        show_default=True,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run/--no-dry-run",
        help="Print the command that would run without running it.",
        show_default=True,
    ),
    log_format: str = typer.Option("text", "--log-format", help="Log format (text or json)."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append logs to this file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Resolve options, configure logging and run the dispatcher when no command is given."""

    if log_format not in LOG_FORMATS:
        raise typer.BadParameter(f"must be one of {list(LOG_FORMATS)}", param_hint="--log-format")
    logger = configure_logging(log_format, verbose, log_file)
    ctx.obj = {
        "config": config,
        "strict": strict,
        "dry_run": dry_run,
        "logger": logger,
    }
    if ctx.invoked_subcommand is None:
        run(ctx)


@app.command()
def run(ctx: typer.Context) -> None:
    """Run the collaborator selected by KIND and exit with its status."""

    run_config, collaborators = _resolve(ctx)
    logger: logging.Logger = ctx.obj["logger"]
    dispatcher = Dispatcher(collaborators, dry_run=ctx.obj["dry_run"])
    try:
        dispatcher.dispatch(run_config)
    except ConfigurationError as exc:
        _fail_config(exc)
    except CollaboratorLaunchError as exc:
        typer.secho(f"[error] {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=exc.exit_code)
    except CollaboratorError as exc:
        logger.debug("Propagating collaborator status", extra={"exit_code": exc.exit_code})
        raise typer.Exit(code=exc.exit_code)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the resolved run kind and planned command as JSON."""

    run_config, collaborators = _resolve(ctx)
    invocation = plan_invocation(run_config, collaborators)
    payload = {
        "kind": run_config.kind.value,
        "raw_kind": run_config.raw_kind,
        "command": list(invocation.command) if invocation else None,
        "env": dict(invocation.env_overrides) if invocation else {},
        "workdir": str(invocation.workdir) if invocation and invocation.workdir else None,
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def main() -> None:
    """Entrypoint for the CLI."""

    app()

"""Mode dispatcher: pick one collaborator from ``KIND`` and run it."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from opentelemetry.trace import TracerProvider

from .exceptions import (
    CollaboratorError,
    CollaboratorLaunchError,
    CollaboratorNotExecutableError,
    CollaboratorNotFoundError,
    ConfigurationError,
    DispatchError,
)
from .invocations import plan_invocation
from .models import CollaboratorConfig, DispatchResult, Invocation, RunConfig
from .telemetry import dispatch_span, record_outcome, tracing_enabled

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str], Mapping[str, str], Optional[Path]], int]
Tracer = Callable[[str], None]


def run_collaborator(command: Sequence[str], env: Mapping[str, str], cwd: Optional[Path]) -> int:
    """Run ``command`` to completion with inherited stdio and return its status."""

    completed = subprocess.run(list(command), env=dict(env), cwd=cwd, check=False)
    return completed.returncode


def stderr_trace(line: str) -> None:
    """Echo ``line`` to stderr the way ``set -o xtrace`` does."""

    sys.stderr.write(line + "\n")
    sys.stderr.flush()


class Dispatcher:
    """Dispatches a resolved :class:`RunConfig` to at most one collaborator."""

    def __init__(
        self,
        collaborators: Optional[CollaboratorConfig] = None,
        *,
        runner: Runner = run_collaborator,
        trace: Tracer = stderr_trace,
        dry_run: bool = False,
        enable_tracing: Optional[bool] = None,
        tracer_provider: Optional[TracerProvider] = None,
    ) -> None:
        self._collaborators = collaborators or CollaboratorConfig()
        self._runner = runner
        self._trace = trace
        self._dry_run = dry_run
        self._enable_tracing = tracing_enabled() if enable_tracing is None else enable_tracing
        self._tracer_provider = tracer_provider

    def dispatch(self, config: RunConfig) -> DispatchResult:
        """Run the collaborator selected by ``config.kind``.

        Raises :class:`CollaboratorError` on the first non-zero exit status;
        nothing runs after it.
        """

        invocation = plan_invocation(config, self._collaborators)
        with dispatch_span(
            config.kind.value,
            enabled=self._enable_tracing,
            tracer_provider=self._tracer_provider,
        ) as span:
            if invocation is None:
                logger.info(
                    "No action for run kind",
                    extra={"kind": config.kind.value, "raw_kind": config.raw_kind},
                )
                record_outcome(span, 0)
                return DispatchResult(kind=config.kind)

            _check_workdir(invocation)
            line = invocation.describe()
            if self._dry_run:
                self._trace(f"[dry-run] + {line}")
                record_outcome(span, 0, line)
                return DispatchResult(kind=config.kind, invocation=invocation, dry_run=True)

            self._trace(f"+ {line}")
            logger.debug(
                "Executing collaborator",
                extra={"kind": config.kind.value, "command": list(invocation.command)},
            )
            try:
                returncode = self._execute(invocation, config.environ)
            except CollaboratorLaunchError as exc:
                record_outcome(span, exc.exit_code, line)
                raise
            record_outcome(span, returncode, line)
            if returncode != 0:
                logger.error(
                    "Collaborator failed",
                    extra={"kind": config.kind.value, "returncode": returncode},
                )
                raise CollaboratorError(invocation, returncode)
            return DispatchResult(kind=config.kind, invocation=invocation, returncode=returncode)

    def _execute(self, invocation: Invocation, environ: Mapping[str, str]) -> int:
        try:
            return self._runner(invocation.command, invocation.child_env(environ), invocation.workdir)
        except FileNotFoundError as exc:
            raise CollaboratorNotFoundError(invocation) from exc
        except PermissionError as exc:
            raise CollaboratorNotExecutableError(invocation) from exc
        except OSError as exc:
            raise CollaboratorLaunchError(invocation, exc.strerror or str(exc)) from exc


def _check_workdir(invocation: Invocation) -> None:
    if invocation.workdir is not None and not invocation.workdir.is_dir():
        raise ConfigurationError(f"Working directory not found: {invocation.workdir}")


def dispatch(
    config: RunConfig,
    collaborators: Optional[CollaboratorConfig] = None,
    **options,
) -> int:
    """Dispatch ``config`` and return the exit status for the whole run."""

    try:
        Dispatcher(collaborators, **options).dispatch(config)
    except DispatchError as exc:
        return exc.exit_code
    return 0

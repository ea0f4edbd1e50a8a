"""Construction of the collaborator command lines for each run kind."""

from __future__ import annotations

from typing import Optional

from .config import LOG_LEVEL_VAR
from .models import CollaboratorConfig, Invocation, RunConfig, RunKind

INTEGRATION_PACKAGE = "integration"
INTEGRATION_PROFILE = "default"
INTEGRATION_TARGET = "sniffed_node"


def build_invocation(collaborators: CollaboratorConfig) -> Invocation:
    """Run every workspace test target verbosely."""

    return Invocation(
        command=[collaborators.cargo, "test", "--verbose", "--all"],
        workdir=collaborators.workdir,
    )


def integration_invocation(config: RunConfig, collaborators: CollaboratorConfig) -> Invocation:
    """Run the integration entry point against a sniffed node."""

    return Invocation(
        command=[
            collaborators.cargo,
            "run",
            "-p",
            INTEGRATION_PACKAGE,
            "--",
            INTEGRATION_PROFILE,
            INTEGRATION_TARGET,
        ],
        env_overrides={LOG_LEVEL_VAR: config.log_level},
        workdir=collaborators.workdir,
    )


def plan_invocation(
    config: RunConfig,
    collaborators: Optional[CollaboratorConfig] = None,
) -> Optional[Invocation]:
    """Return the invocation for ``config.kind``, or ``None`` for the no-op branch."""

    collaborators = collaborators or CollaboratorConfig()
    if config.kind is RunKind.BUILD:
        return build_invocation(collaborators)
    if config.kind is RunKind.INTEGRATION:
        return integration_invocation(config, collaborators)
    if config.kind is RunKind.UNRECOGNIZED:
        return None
    raise ValueError(f"Unhandled run kind: {config.kind!r}")  # pragma: no cover

"""Data models for CI mode dispatch."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Sequence


class RunKind(str, Enum):
    """Kinds of CI run selected through the ``KIND`` variable."""

    BUILD = "build"
    INTEGRATION = "integration"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "RunKind":
        if raw == cls.BUILD.value:
            return cls.BUILD
        if raw == cls.INTEGRATION.value:
            return cls.INTEGRATION
        return cls.UNRECOGNIZED


def _freeze(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class RunConfig:
    """Run configuration resolved once from the process environment."""

    kind: RunKind
    raw_kind: Optional[str] = None
    log_level: str = "debug"
    environ: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "environ", _freeze(self.environ))


@dataclass(frozen=True)
class CollaboratorConfig:
    """Location of the external tools the dispatcher shells out to."""

    cargo: str = "cargo"
    workdir: Optional[Path] = None


@dataclass(frozen=True)
class Invocation:
    """A single collaborator process the dispatcher is about to run."""

    command: Sequence[str]
    env_overrides: Mapping[str, str] = field(default_factory=dict)
    workdir: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", tuple(self.command))
        object.__setattr__(self, "env_overrides", _freeze(self.env_overrides))

    def child_env(self, base: Mapping[str, str]) -> dict[str, str]:
        env = dict(base)
        env.update(self.env_overrides)
        return env

    def describe(self) -> str:
        assignments = [f"{key}={shlex.quote(value)}" for key, value in self.env_overrides.items()]
        return " ".join([*assignments, shlex.join(self.command)])


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single dispatch."""

    kind: RunKind
    invocation: Optional[Invocation] = None
    returncode: int = 0
    dry_run: bool = False

    @property
    def spawned(self) -> bool:
        return self.invocation is not None and not self.dry_run

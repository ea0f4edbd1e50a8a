"""Configuration loading for the CI dispatcher."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError
from .models import CollaboratorConfig, RunConfig, RunKind

KIND_VAR = "KIND"
LOG_LEVEL_VAR = "ELASTIC_LOG"
CONFIG_PATH_VAR = "CI_DISPATCH_CONFIG"
DEFAULT_LOG_LEVEL = "debug"

_COLLABORATOR_KEYS = frozenset({"cargo", "workdir"})


def load_run_config(environ: Mapping[str, str], *, strict: bool = True) -> RunConfig:
    """Resolve the run configuration from ``environ``.

    Under strict resolution an unset ``KIND`` is a configuration error, the
    same way ``set -o nounset`` treats an unbound variable. A set but empty
    or unknown value is not an error: it selects the no-op branch.
    """

    raw_kind = environ.get(KIND_VAR)
    if raw_kind is None and strict:
        raise ConfigurationError(f"{KIND_VAR}: unbound variable")
    return RunConfig(
        kind=RunKind.parse(raw_kind),
        raw_kind=raw_kind,
        log_level=DEFAULT_LOG_LEVEL,
        environ=environ,
    )


def _expand(path: str, base: Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = (base / candidate).resolve()
    return candidate


def _parse_collaborators(data: Mapping[str, Any], base_dir: Path) -> CollaboratorConfig:
    unknown = sorted(set(data) - _COLLABORATOR_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown collaborator settings: {', '.join(unknown)}")
    cargo = data.get("cargo", CollaboratorConfig().cargo)
    if not isinstance(cargo, str) or not cargo.strip():
        raise ConfigurationError("collaborators.cargo must be a non-empty string")
    workdir = data.get("workdir")
    if workdir is not None and not isinstance(workdir, str):
        raise ConfigurationError("collaborators.workdir must be a string path")
    resolved_workdir = _expand(workdir, base_dir) if workdir else None
    if resolved_workdir is not None and not resolved_workdir.is_dir():
        raise ConfigurationError(f"collaborators.workdir is not a directory: {resolved_workdir}")
    return CollaboratorConfig(cargo=cargo, workdir=resolved_workdir)


def load_collaborator_config(path: Optional[Path]) -> CollaboratorConfig:
    """Load collaborator overrides from a TOML file, or return the defaults."""

    if path is None:
        return CollaboratorConfig()
    path = path.expanduser()
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc
    section = data.get("collaborators", {})
    if not isinstance(section, dict):
        raise ConfigurationError("[collaborators] must be a table")
    return _parse_collaborators(section, path.parent.resolve())

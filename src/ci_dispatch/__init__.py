"""Nightly CI mode dispatcher."""

from .config import load_collaborator_config, load_run_config
from .dispatcher import Dispatcher, dispatch
from .exceptions import (
    CollaboratorError,
    CollaboratorLaunchError,
    CollaboratorNotExecutableError,
    CollaboratorNotFoundError,
    ConfigurationError,
    DispatchError,
)
from .invocations import plan_invocation
from .models import CollaboratorConfig, DispatchResult, Invocation, RunConfig, RunKind

__all__ = [
    "CollaboratorConfig",
    "CollaboratorError",
    "CollaboratorLaunchError",
    "CollaboratorNotExecutableError",
    "CollaboratorNotFoundError",
    "ConfigurationError",
    "DispatchError",
    "DispatchResult",
    "Dispatcher",
    "Invocation",
    "RunConfig",
    "RunKind",
    "dispatch",
    "load_collaborator_config",
    "load_run_config",
    "plan_invocation",
]

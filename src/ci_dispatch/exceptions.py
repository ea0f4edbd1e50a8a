"""Exception types raised while dispatching a CI run."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .models import Invocation

EX_CONFIG = 78
EX_NOT_EXECUTABLE = 126
EX_NOT_FOUND = 127


class DispatchError(RuntimeError):
    """Base class for dispatch failures."""

    exit_code: int = 1


class ConfigurationError(DispatchError):
    """Raised when required configuration is missing or malformed."""

    exit_code = EX_CONFIG


class CollaboratorError(DispatchError):
    """Raised when a collaborator process exits with a non-zero status."""

    def __init__(self, invocation: "Invocation", returncode: int) -> None:
        super().__init__(f"{invocation.describe()} exited with status {returncode}")
        self.invocation = invocation
        self.returncode = returncode

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        # Signals surface as negative return codes; report them the way a shell would.
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


class CollaboratorLaunchError(CollaboratorError):
    """Raised when the collaborator process cannot be started at all."""

    def __init__(self, invocation: "Invocation", reason: str, returncode: int = EX_NOT_EXECUTABLE) -> None:
        super().__init__(invocation, returncode)
        self.args = (f"{invocation.command[0]}: {reason}",)


class CollaboratorNotFoundError(CollaboratorLaunchError):
    """Raised when the collaborator executable cannot be located."""

    def __init__(self, invocation: "Invocation") -> None:
        super().__init__(invocation, "command not found", EX_NOT_FOUND)


class CollaboratorNotExecutableError(CollaboratorLaunchError):
    """Raised when the collaborator exists but may not be executed."""

    def __init__(self, invocation: "Invocation") -> None:
        super().__init__(invocation, "Permission denied", EX_NOT_EXECUTABLE)

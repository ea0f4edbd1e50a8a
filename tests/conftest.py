from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterator, Mapping, Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from ci_dispatch.logging import LOGGER_NAME  # noqa: E402

os.environ.setdefault("CI_DISPATCH_ENABLE_OTEL", "0")


class RecordingRunner:
    """Stands in for the subprocess runner and records every spawn."""

    def __init__(self, returncode: int = 0, traces: Optional[list[str]] = None) -> None:
        self.returncode = returncode
        self.traces = traces
        self.calls: list[dict[str, object]] = []

    def __call__(self, command: Sequence[str], env: Mapping[str, str], cwd: Optional[Path]) -> int:
        self.calls.append(
            {
                "command": list(command),
                "env": dict(env),
                "cwd": cwd,
                "traces_before_spawn": list(self.traces) if self.traces is not None else None,
            }
        )
        return self.returncode


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def fake_cargo(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable that records its arguments and ELASTIC_LOG, then exits."""

    def factory(exit_code: int = 0, name: str = "cargo", mode: int = 0o755) -> Path:
        record = tmp_path / f"{name}.calls"
        script = tmp_path / name
        script.write_text(
            "#!/bin/bash\n"
            f"printf '%s\\n' \"$*\" >> '{record}'\n"
            f"printf 'ELASTIC_LOG=%s\\n' \"${{ELASTIC_LOG-<unset>}}\" >> '{record}'\n"
            f"exit {exit_code}\n",
            encoding="utf-8",
        )
        script.chmod(mode)
        return script

    return factory


def _read_calls(script: Path) -> list[str]:
    record = script.with_name(f"{script.name}.calls")
    if not record.exists():
        return []
    return record.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def calls_of() -> Callable[[Path], list[str]]:
    return _read_calls


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True

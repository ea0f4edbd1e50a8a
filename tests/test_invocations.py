from __future__ import annotations

from pathlib import Path

from ci_dispatch.invocations import plan_invocation
from ci_dispatch.models import CollaboratorConfig, RunConfig, RunKind


def test_build_runs_every_workspace_test_verbosely() -> None:
    invocation = plan_invocation(RunConfig(kind=RunKind.BUILD, raw_kind="build"))
    assert invocation is not None
    assert invocation.command == ("cargo", "test", "--verbose", "--all")
    assert dict(invocation.env_overrides) == {}
    assert invocation.describe() == "cargo test --verbose --all"


def test_integration_targets_sniffed_node_with_debug_logging() -> None:
    invocation = plan_invocation(RunConfig(kind=RunKind.INTEGRATION, raw_kind="integration"))
    assert invocation is not None
    assert invocation.command == (
        "cargo",
        "run",
        "-p",
        "integration",
        "--",
        "default",
        "sniffed_node",
    )
    assert dict(invocation.env_overrides) == {"ELASTIC_LOG": "debug"}
    assert invocation.describe() == (
        "ELASTIC_LOG=debug cargo run -p integration -- default sniffed_node"
    )


def test_unrecognized_kind_plans_nothing() -> None:
    assert plan_invocation(RunConfig(kind=RunKind.UNRECOGNIZED, raw_kind="lint")) is None


def test_collaborator_overrides_apply_to_both_branches(tmp_path: Path) -> None:
    collaborators = CollaboratorConfig(cargo="/opt/cargo", workdir=tmp_path)
    for kind in (RunKind.BUILD, RunKind.INTEGRATION):
        invocation = plan_invocation(RunConfig(kind=kind), collaborators)
        assert invocation is not None
        assert invocation.command[0] == "/opt/cargo"
        assert invocation.workdir == tmp_path


def test_child_env_overlays_without_mutating_base() -> None:
    invocation = plan_invocation(RunConfig(kind=RunKind.INTEGRATION))
    assert invocation is not None
    base = {"ELASTIC_LOG": "info", "HOME": "/home/ci"}
    env = invocation.child_env(base)
    assert env == {"ELASTIC_LOG": "debug", "HOME": "/home/ci"}
    assert base["ELASTIC_LOG"] == "info"

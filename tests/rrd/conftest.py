"""Fixtures for command compilation and execution tests."""

import pytest

from cgg.graph_args import GraphArguments
from cgg.shell import CommandResult


@pytest.fixture
def three_slot_args():
    """Local graph arguments with three images of one series each."""
    from cgg.locator import Target

    graph_args = GraphArguments(Target.LOCAL)
    for name in ("chrome", "dolphin", "firefox"):
        graph_args.new_graph()
        graph_args.push(name, "#e6194b", 3, f"/data/processes-{name}/ps_rss.rrd")
    return graph_args


class FakeRunner:
    """Stand-in for run_command: records calls, replays queued results."""

    def __init__(self, *returncodes: int):
        self.returncodes = list(returncodes)
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        code = self.returncodes.pop(0) if self.returncodes else 0
        stderr = "" if code == 0 else f"ERROR: step {len(self.calls)} failed\n"
        return CommandResult(tuple(args), code, "", stderr)


@pytest.fixture
def fake_runner(monkeypatch):
    """Install a FakeRunner; call it with exit codes to queue."""

    def _install(*returncodes: int) -> FakeRunner:
        runner = FakeRunner(*returncodes)
        monkeypatch.setattr("cgg.rrd.run_command", runner)
        return runner

    return _install

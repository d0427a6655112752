"""Root fixtures for all tests."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear cgg env vars and reset config singleton before each test."""
    for key in list(os.environ.keys()):
        if key.startswith("CGG_"):
            monkeypatch.delenv(key, raising=False)

    # Reset config singleton
    import cgg.env

    cgg.env._config = None

    yield

    # Reset again after test
    cgg.env._config = None


@pytest.fixture
def collectd_dir(tmp_path):
    """Empty collectd host directory."""
    host_dir = tmp_path / "collectd" / "myhost"
    host_dir.mkdir(parents=True)
    return host_dir


@pytest.fixture
def make_processes(collectd_dir):
    """Create processes-<name> directories (with an empty ps_rss.rrd each)."""

    def _make(*names: str) -> Path:
        for name in names:
            proc_dir = collectd_dir / f"processes-{name}"
            proc_dir.mkdir()
            (proc_dir / "ps_rss.rrd").touch()
        return collectd_dir

    return _make


@pytest.fixture
def make_memory(collectd_dir):
    """Create memory/memory-<type>.rrd files."""

    def _make(*types: str) -> Path:
        mem_dir = collectd_dir / "memory"
        mem_dir.mkdir(exist_ok=True)
        for memory_type in types:
            (mem_dir / f"memory-{memory_type}.rrd").touch()
        return mem_dir

    return _make


@pytest.fixture
def remote_locator():
    """Remote locator pointing at a collectd directory."""
    from cgg.locator import parse_locator

    return parse_locator("marcin@10.0.0.1:/var/lib/collectd/myhost")


@pytest.fixture
def fixed_ts(monkeypatch):
    """Freeze log timestamp for deterministic output assertions."""
    from cgg import log

    timestamp = "2024-01-15 10:30:45"
    monkeypatch.setattr(log, "_ts", lambda: timestamp)
    return timestamp


FAKE_RRDTOOL = """#!/bin/sh
# Records its arguments one per line, then writes a fake image to $2.
for arg in "$@"; do printf '%s\\n' "$arg"; done >> "{log}"
printf -- '--\\n' >> "{log}"
[ "$1" = "graph" ] || exit 2
case "$*" in *FAIL*) echo "ERROR: opening 'FAIL': No such file" >&2; exit 1;; esac
printf 'PNG' > "$2"
"""

# Like ssh: joins the remaining arguments and hands them to a shell.
FAKE_SSH = """#!/bin/sh
shift
exec sh -c "$*"
"""

FAKE_SCP = """#!/bin/sh
cp "${1#*:}" "$2"
"""


@pytest.fixture
def fake_tools(tmp_path, monkeypatch):
    """Install fake rrdtool/ssh/scp executables via CGG_* env vars.

    Returns a dict with the tool paths and a ``calls()`` helper that returns
    the argument lists rrdtool was invoked with.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    call_log = tmp_path / "rrdtool_calls.log"

    tools = {
        "rrdtool": FAKE_RRDTOOL.format(log=call_log),
        "ssh": FAKE_SSH,
        "scp": FAKE_SCP,
    }
    paths = {}
    for name, script in tools.items():
        path = bin_dir / name
        path.write_text(script)
        path.chmod(0o755)
        paths[name] = path

    monkeypatch.setenv("CGG_RRDTOOL", str(paths["rrdtool"]))
    monkeypatch.setenv("CGG_SSH", str(paths["ssh"]))
    monkeypatch.setenv("CGG_SCP", str(paths["scp"]))
    monkeypatch.setenv("CGG_REMOTE_SCRATCH", str(tmp_path / "remote-scratch.png"))

    # Other fixtures may already have loaded the config
    import cgg.env

    cgg.env._config = None

    def calls() -> list[list[str]]:
        if not call_log.exists():
            return []
        text = call_log.read_text()
        return [chunk.strip("\n").split("\n") for chunk in text.split("--\n") if chunk.strip()]

    return {**paths, "calls": calls, "scratch": tmp_path / "remote-scratch.png"}

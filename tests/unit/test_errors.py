"""Tests for error context handling."""

import pytest

from cgg.errors import (
    CggError,
    CommandFailed,
    MissingDataFile,
    RemoteCopyFailed,
    RenderFailed,
)
from cgg.shell import CommandResult


class TestContext:
    """Operation context on errors."""

    def test_message_without_context(self):
        assert str(MissingDataFile("no memory-free.rrd")) == "no memory-free.rrd"

    def test_context_outermost_first(self):
        err = RemoteCopyFailed("scp failed")
        err.add_context("remote copy")
        err.add_context("image 2 of 3")

        assert err.context == ["image 2 of 3", "remote copy"]
        assert str(err) == "image 2 of 3: remote copy: scp failed"

    def test_add_context_returns_same_error(self):
        err = RenderFailed("boom")
        assert err.add_context("image 1 of 1") is err

    def test_reraise_keeps_type(self):
        with pytest.raises(MissingDataFile) as exc_info:
            try:
                raise MissingDataFile("gone")
            except CggError as e:
                raise e.add_context("memory plugin")
        assert str(exc_info.value) == "memory plugin: gone"


class TestCommandFailed:
    """Captured command results on errors."""

    def test_carries_result(self):
        result = CommandResult(("rrdtool", "graph"), 1, "", "ERROR: bad")
        err = RenderFailed("rrdtool failed", result)

        assert isinstance(err, CommandFailed)
        assert err.result.stderr == "ERROR: bad"

    def test_result_optional(self):
        assert RenderFailed("no dir").result is None

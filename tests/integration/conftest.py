"""Fixtures for end-to-end graph generation."""

import pytest


@pytest.fixture
def populated_collectd(make_processes, make_memory):
    """Collectd directory with five processes and all memory types."""
    host_dir = make_processes("firefox", "chrome", "dolphin", "rust language server", "vscode")
    make_memory("buffered", "cached", "free", "slab_recl", "slab_unrecl", "used")
    return host_dir

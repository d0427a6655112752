"""Environment variable parsing and configuration."""

import os
from pathlib import Path
from typing import Optional


def get_str(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get string env var."""
    return os.environ.get(key, default)


def get_int(key: str, default: int) -> int:
    """Get integer env var."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean env var (0/1, true/false, yes/no)."""
    val = os.environ.get(key, "").lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


def get_path(key: str, default: str) -> Path:
    """Get path env var, expanding user."""
    val = os.environ.get(key, default)
    return Path(val).expanduser()


class Config:
    """Configuration loaded from environment variables."""

    def __init__(self):
        self.cgg_debug = get_bool("CGG_DEBUG", False)

        # External executables
        self.rrdtool_command = get_str("CGG_RRDTOOL", "rrdtool")
        self.ssh_command = get_str("CGG_SSH", "ssh")
        self.scp_command = get_str("CGG_SCP", "scp")

        # Where the renderer writes on the remote host before copy-back
        self.remote_scratch_path = get_str("CGG_REMOTE_SCRATCH", "/tmp/cgg-out.png")

        # Command-line defaults
        self.default_out = get_path("CGG_OUT", "out.png")
        self.default_width = get_int("CGG_WIDTH", 1024)
        self.default_height = get_int("CGG_HEIGHT", 768)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config

"""Environment-driven settings shared by the CLI and the default synthesizer."""
from __future__ import annotations

import os
from pathlib import Path


def get_effective_cwd() -> Path:
    """Get the effective current working directory for file resolution.

    Checks for the MIRRORC_CWD environment variable set by wrapper scripts.
    If present, uses that directory. Otherwise falls back to os.getcwd().
    """
    mirrorc_cwd = os.environ.get('MIRRORC_CWD')
    if mirrorc_cwd:
        return Path(mirrorc_cwd)
    return Path.cwd()


def get_search_paths() -> tuple[str, ...]:
    """Extra directories (MIRRORC_PATH, os.pathsep separated) for foreign modules."""
    raw = os.environ.get('MIRRORC_PATH', '')
    return tuple(p for p in raw.split(os.pathsep) if p)


def get_log_level(default: str = "WARNING") -> str:
    return os.environ.get('MIRRORC_LOG_LEVEL', default).upper()

"""Centralized path resolution for the importsorter package.

This is the ONLY module that touches __file__ or computes package paths.
Every other module imports from here.

Environment variables:
    IMPORTSORTER_DEFAULTS — Path to an alternative ``defaults.yaml``. When
        set to an existing file, the config layer reads it instead of the
        copy shipped inside the package.
"""

import os
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent

# Read before the config layer exists, so it cannot come from defaults.yaml.
_DEFAULTS_ENV = "IMPORTSORTER_DEFAULTS"


def package_dir() -> Path:
    """Return the installed package directory."""
    return _PACKAGE_DIR


def config_dir() -> Path:
    """Return the config/ directory path."""
    return _PACKAGE_DIR / "config"


def defaults_path() -> Path:
    """Return the defaults.yaml path (env override or packaged copy)."""
    env = os.environ.get(_DEFAULTS_ENV)
    if env:
        p = Path(env)
        if p.is_file():
            return p
    return config_dir() / "defaults.yaml"

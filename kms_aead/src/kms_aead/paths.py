"""Filesystem locations used by kms-aead."""
from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "kms-aead"


def user_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=True).user_config_path)


def project_config_file(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / ".kms-aead" / "config.yaml"

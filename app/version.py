"""Package version helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata, resources

from packaging.version import InvalidVersion, Version

_DISTRIBUTION = "smf-tools"
_FALLBACK_VERSION = "0.0.0.dev0"


def _version_from_env() -> str | None:
    env_version = os.environ.get("SMF_TOOLS_VERSION")
    if not env_version:
        return None
    return env_version


def _read_version_file() -> str | None:
    try:
        text = resources.files(__package__ or "app").joinpath("VERSION").read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError, OSError):
        return None
    return text.strip() or None


def _version_from_metadata() -> str | None:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def normalize_version(raw_version: str) -> str | None:
    """Return the canonical PEP 440 form of ``raw_version`` or ``None``."""

    candidate = raw_version.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]
    try:
        return str(Version(candidate))
    except InvalidVersion:
        return None


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the package version.

    The order of precedence is:
    1. The ``SMF_TOOLS_VERSION`` environment variable.
    2. An embedded ``VERSION`` file next to this module.
    3. Installed distribution metadata.
    4. A fallback development version string.

    Candidates that are not valid PEP 440 versions are skipped.
    """

    for resolver in (_version_from_env, _read_version_file, _version_from_metadata):
        raw = resolver()
        if not raw:
            continue
        version = normalize_version(raw)
        if version:
            return version
    return _FALLBACK_VERSION


__all__ = ["get_app_version", "normalize_version"]

"""Decoder configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "smf.json"
_DECODER_CONFIG_CACHE: DecoderConfig | None = None

_STATUS_POLICIES = ("strict", "lenient")
_LOG_VERBOSITIES = ("disabled", "error", "warning", "info", "verbose")
_DEFAULT_STATUS_POLICY = "strict"
_DEFAULT_LOG_VERBOSITY = "info"


@dataclass(frozen=True)
class LoggingSettings:
    """File log settings applied by :mod:`shared.logging_config`."""

    verbosity: str


@dataclass(frozen=True)
class DecoderConfig:
    """Structured configuration values for the SMF decoder."""

    status_policy: str
    logging: LoggingSettings

    @property
    def lenient(self) -> bool:
        return self.status_policy == "lenient"


def get_decoder_config() -> DecoderConfig:
    """Return the cached decoder configuration."""

    global _DECODER_CONFIG_CACHE
    if _DECODER_CONFIG_CACHE is None:
        _DECODER_CONFIG_CACHE = load_decoder_config()
    return _DECODER_CONFIG_CACHE


def reset_decoder_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _DECODER_CONFIG_CACHE
    _DECODER_CONFIG_CACHE = None


def load_decoder_config(path: str | Path | None = None) -> DecoderConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    decoder_section = data.get("decoder") if isinstance(data, Mapping) else None
    logging_section = data.get("logging") if isinstance(data, Mapping) else None
    return DecoderConfig(
        status_policy=_parse_status_policy(decoder_section),
        logging=_parse_logging_section(logging_section),
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_status_policy(section: Mapping[str, Any] | None) -> str:
    if not isinstance(section, Mapping):
        return _DEFAULT_STATUS_POLICY
    return _coerce_choice(section.get("status_policy"), _STATUS_POLICIES, default=_DEFAULT_STATUS_POLICY)


def _parse_logging_section(section: Mapping[str, Any] | None) -> LoggingSettings:
    if not isinstance(section, Mapping):
        return LoggingSettings(verbosity=_DEFAULT_LOG_VERBOSITY)
    verbosity = _coerce_choice(section.get("verbosity"), _LOG_VERBOSITIES, default=_DEFAULT_LOG_VERBOSITY)
    return LoggingSettings(verbosity=verbosity)


def _coerce_choice(value: Any, choices: tuple[str, ...], *, default: str) -> str:
    if not isinstance(value, str):
        return default
    candidate = value.strip().lower()
    if candidate not in choices:
        return default
    return candidate


__all__ = [
    "DecoderConfig",
    "LoggingSettings",
    "get_decoder_config",
    "load_decoder_config",
    "reset_decoder_config_cache",
]

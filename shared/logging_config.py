"""Central logging configuration for SMF decoding tools.

Decoder modules only create module level loggers; this module attaches the
handlers.  The file log's default verbosity comes from the ``logging`` section
of the decoder configuration and can be adjusted at run time.

Two environment variables allow customising where the log file is written:

``SMF_LOG_FILE``
    Absolute path to the log file that should be created.

``SMF_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``SMF_LOG_FILE`` is present.

Home directory paths (for example the location of a decoded file) are
replaced with ``<user_home>`` before records are written.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

from app.config import get_decoder_config
from app.version import get_app_version

_LOG_FILE_ENV = "SMF_LOG_FILE"
_LOG_DIR_ENV = "SMF_LOG_DIR"
_DEFAULT_DIRNAME = ".smf_tools"
_DEFAULT_LOGNAME = "decoder.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_HANDLER_TAG = "_smf_logging_handler"
_FILE_HANDLER: logging.FileHandler | None = None

USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_CURRENT_VERBOSITY: LogVerbosity | None = None


def _home_patterns() -> list[re.Pattern[str]]:
    candidates: set[str] = set()
    home = str(Path.home())
    if home:
        candidates.add(home)
    value = os.environ.get("HOME")
    if value:
        candidates.add(os.path.expanduser(value))
    normalised = {os.path.normpath(candidate) for candidate in candidates}
    flags = re.IGNORECASE if os.name == "nt" else 0
    return [
        re.compile(re.escape(candidate), flags)
        for candidate in sorted(normalised, key=len, reverse=True)
        if candidate not in {os.sep, "", "."}
    ]


class _RedactingFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._patterns = _home_patterns()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        for pattern in self._patterns:
            formatted = pattern.sub(USER_HOME_PLACEHOLDER, formatted)
        return formatted


def _configured_verbosity() -> LogVerbosity:
    return LogVerbosity(get_decoder_config().logging.verbosity)


def ensure_app_logging() -> Path:
    """Configure the root logger once and return the log file path.

    The first call installs a file handler (filtered by the configured
    verbosity) and a console handler at INFO level when stderr is a terminal.
    Later calls are no-ops.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    if _CONFIGURED and _LOG_PATH is not None:
        return _LOG_PATH

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if _CURRENT_VERBOSITY is None:
        _CURRENT_VERBOSITY = _configured_verbosity()

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = _RedactingFormatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    root.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if _should_log_to_stderr(root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.INFO)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, True)
        root.addHandler(stream_handler)

    _CONFIGURED = True
    _LOG_PATH = log_path

    logging.getLogger(__name__).info(
        "smf-tools %s writing logs to %s (verbosity=%s)",
        get_app_version(),
        log_path,
        _CURRENT_VERBOSITY.value,
    )
    return log_path


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    ensure_app_logging()
    _CURRENT_VERBOSITY = verbosity
    if _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_VERBOSITY_LEVELS[verbosity])
    logging.getLogger(__name__).info("File log verbosity set to %s", verbosity.value)


def get_file_log_verbosity() -> LogVerbosity:
    """Return the current verbosity level for the log file."""

    if _CURRENT_VERBOSITY is None:
        return _configured_verbosity()
    return _CURRENT_VERBOSITY


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty):
        return False
    try:
        if not is_tty():
            return False
    except (OSError, ValueError):
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_app_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _CURRENT_VERBOSITY = None


__all__ = [
    "LogVerbosity",
    "USER_HOME_PLACEHOLDER",
    "ensure_app_logging",
    "get_file_log_verbosity",
    "set_file_log_verbosity",
]

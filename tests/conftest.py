from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    tests_dir = root / "tests"
    tests_str = str(tests_dir)
    if tests_str not in sys.path:
        sys.path.insert(1, tests_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep log files and cached configuration out of the user's environment."""

    from app.config import reset_decoder_config_cache

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("SMF_LOG_DIR", str(log_dir))
    monkeypatch.delenv("SMF_LOG_FILE", raising=False)
    reset_decoder_config_cache()

    yield

    reset_decoder_config_cache()

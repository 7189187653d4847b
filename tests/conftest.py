from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from luckmd.create import create


class RecordingLogger:
    """Logger service double that keeps every call."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def _log(self, level: str, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append((level, msg % args if args else msg))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log("debug", msg, *args)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log("info", msg, *args)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log("warning", msg, *args)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log("error", msg, *args)

    def messages(self, level: str) -> List[str]:
        return [m for lvl, m in self.records if lvl == level]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def context(recording_logger: RecordingLogger):
    """Activation context over a fresh runtime."""
    return create(logger=recording_logger).context()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of tests."""
    monkeypatch.delenv("LUCKMD_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("luckmd.config.loader.user_config_path", lambda: tmp_path / "no-user.toml")

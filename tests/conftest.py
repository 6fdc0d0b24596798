"""Shared fixtures for dbdump tests."""

import threading
from typing import Any, List, Tuple

import pytest

from dbdump.backup import ConnectionSpec, EngineKind
from dbdump.logger import Logger


class RecordingLogger(Logger):
    """Logger that keeps every record in memory."""

    def __init__(self):
        self.records: List[Tuple[str, str, dict]] = []
        self._lock = threading.Lock()

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        with self._lock:
            self.records.append((level, message, kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, **kwargs)

    def get_run_id(self) -> str:
        return "test-run"

    def messages(self, level: str = None) -> List[str]:
        return [msg for lvl, msg, _ in self.records if level is None or lvl == level]


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def pg_spec() -> ConnectionSpec:
    return ConnectionSpec(
        engine=EngineKind.POSTGRES,
        host="db1",
        port=5432,
        database="app",
        username="u",
        password="p",
    )


@pytest.fixture
def mysql_spec() -> ConnectionSpec:
    return ConnectionSpec(
        engine=EngineKind.MYSQL,
        host="db2",
        port=3306,
        database="shop",
        username="root",
        password="secret",
    )

"""Artifact naming and removal

Dump artifacts are named ``<database>_<unixTimestamp>.<ext>``. Two dumps of
the same database within one second would share that name, so the namer
appends ``-<n>`` when a name was already issued or is still on disk.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Set

from dbdump.backup.connection import ConnectionSpec
from dbdump.logger import Logger

COMPRESSED_SUFFIX = ".zst"


class ArtifactNamer:
    """Issues collision-free artifact paths inside a work directory"""

    def __init__(self, work_dir: Path, clock: Callable[[], float] = time.time):
        self.work_dir = Path(work_dir)
        self._clock = clock
        # Names issued during the current second; only those can collide
        self._issued: Set[str] = set()
        self._issued_at: Optional[int] = None
        self._lock = threading.Lock()

    def base_name(self, spec: ConnectionSpec, timestamp: Optional[int] = None) -> str:
        """Return the undisambiguated file name for a target"""
        if timestamp is None:
            timestamp = int(self._clock())
        return f"{spec.database}_{timestamp}.{spec.engine.dump_extension}"

    def next_path(self, spec: ConnectionSpec) -> Path:
        """Reserve and return a new dump artifact path for ``spec``"""
        timestamp = int(self._clock())
        first = self.base_name(spec, timestamp)
        stem, _, ext = first.rpartition(".")

        with self._lock:
            if timestamp != self._issued_at:
                self._issued.clear()
                self._issued_at = timestamp

            candidate = first
            counter = 0
            while self._taken(candidate):
                counter += 1
                candidate = f"{stem}-{counter}.{ext}"
            self._issued.add(candidate)

        return self.work_dir / candidate

    def _taken(self, name: str) -> bool:
        if name in self._issued:
            return True
        path = self.work_dir / name
        return path.exists() or path.with_name(name + COMPRESSED_SUFFIX).exists()


def remove_artifact(path: Path, logger: Optional[Logger] = None) -> bool:
    """Delete a local artifact

    Removing a path that is already gone is a no-op that logs a warning.

    Returns:
        True if a file was deleted

    Raises:
        OSError: If the file exists but cannot be deleted
    """
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        if logger is not None:
            logger.warning("Artifact already removed", path=str(path))
        else:
            logging.getLogger(__name__).warning(f"Artifact already removed: {path}")
        return False

    if logger is not None:
        logger.debug("Artifact removed", path=str(path))
    return True

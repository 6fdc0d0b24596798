"""Backup Scheduler

Drives the dump -> compress -> upload -> cleanup pipeline over every
configured target, then sleeps for the configured interval and repeats.
A failing target never stops the other targets or the loop.
"""

import threading
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from dbdump.backup.artifacts import ArtifactNamer, remove_artifact
from dbdump.backup.commands import CommandBuilder
from dbdump.backup.compress import Compressor
from dbdump.backup.connection import ConnectionSpec
from dbdump.backup.process import ProcessRunner
from dbdump.backup.uploader import Uploader, object_key
from dbdump.logger import Logger


class Stage(str, Enum):
    """Pipeline stage of one target's iteration"""

    DUMP = "dump"
    COMPRESS = "compress"
    UPLOAD = "upload"
    CLEANUP = "cleanup"


@dataclass
class BackupResult:
    """Outcome of one target in one cycle"""

    target: str
    failed_stage: Optional[Stage] = None
    error: Optional[BaseException] = None
    artifact: Optional[Path] = None
    key: Optional[str] = None
    cleanup_error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.failed_stage is None


class _StageFailed(Exception):
    def __init__(self, stage: Stage, error: BaseException):
        self.stage = stage
        self.error = error
        super().__init__(str(error))


class BackupScheduler:
    """Runs backup cycles over a fixed set of targets"""

    def __init__(
        self,
        targets: Sequence[ConnectionSpec],
        builder: CommandBuilder,
        runner: ProcessRunner,
        uploader: Uploader,
        bucket: str,
        namer: ArtifactNamer,
        logger: Logger,
        compressor: Optional[Compressor] = None,
        interval: Optional[timedelta] = None,
        key_prefix: str = "",
    ):
        """
        Args:
            targets: Databases to back up, in processing order
            builder: Dump command builder
            runner: Process runner for dump commands
            uploader: Object storage uploader
            bucket: Destination bucket
            namer: Artifact path issuer
            logger: Logger
            compressor: Compressor, or None to upload raw dumps
            interval: Sleep between cycles in continuous mode
            key_prefix: Prefix prepended to object keys
        """
        self.targets = tuple(targets)
        self.builder = builder
        self.runner = runner
        self.uploader = uploader
        self.bucket = bucket
        self.namer = namer
        self.logger = logger
        self.compressor = compressor
        self.interval = interval
        self.key_prefix = key_prefix
        self._stop = threading.Event()

    def backup_target(self, spec: ConnectionSpec) -> BackupResult:
        """Run one iteration for a single target

        Never raises; failures are reported in the returned BackupResult.
        """
        target = spec.describe()
        result = BackupResult(target=target)
        self.logger.info("Backing up target", target=target)

        try:
            dump_path = self._run_stage(Stage.DUMP, self._dump, spec)
            result.artifact = dump_path

            if self.compressor is not None:
                result.artifact = self._run_stage(Stage.COMPRESS, self.compressor.compress, dump_path)

            result.key = object_key(self.key_prefix, result.artifact)
            self.logger.info(f"Uploading {result.artifact.name} to {self.bucket}", target=target)
            self._run_stage(Stage.UPLOAD, self.uploader.put, self.bucket, result.key, result.artifact)
        except _StageFailed as failure:
            result.failed_stage = failure.stage
            result.error = failure.error
            self.logger.error(
                f"Backup failed: {failure.error}",
                target=target,
                stage=failure.stage.value,
                artifact=result.artifact,
            )
            return result

        try:
            remove_artifact(result.artifact, self.logger)
        except OSError as e:
            result.cleanup_error = e
            self.logger.warning(
                f"Failed to remove {result.artifact}: {e}",
                target=target,
                stage=Stage.CLEANUP.value,
            )

        self.logger.info("Backup complete", target=target, key=result.key)
        return result

    def run_cycle(self) -> List[BackupResult]:
        """Attempt every target once, each independently"""
        self.logger.info("Backup cycle started", targets=len(self.targets))
        results = [self.backup_target(spec) for spec in self.targets]

        failed = [r for r in results if not r.succeeded]
        self.logger.info(
            "Backup cycle finished",
            succeeded=len(results) - len(failed),
            failed=len(failed),
        )
        return results

    def run_once(self) -> List[BackupResult]:
        """Run a single cycle (single-run mode)

        Raises:
            The first hard failure's underlying exception
        """
        results = self.run_cycle()
        for result in results:
            if result.error is not None:
                raise result.error
        return results

    def run_forever(self) -> None:
        """Run cycles separated by the interval until stop is requested"""
        if self.interval is None:
            raise ValueError("Continuous mode requires an interval")

        while not self._stop.is_set():
            self.run_cycle()
            if self._stop.is_set():
                break
            self.logger.info(f"Sleeping for {self.interval}")
            self._stop.wait(self.interval.total_seconds())

        self.logger.info("Backup scheduler stopped")

    def request_stop(self) -> None:
        """Stop after the current cycle; interrupts the inter-cycle sleep"""
        self._stop.set()

    def abort(self) -> None:
        """Stop now: request stop and kill the dump in progress, if any"""
        self._stop.set()
        self.runner.kill()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def _dump(self, spec: ConnectionSpec) -> Path:
        path = self.namer.next_path(spec)
        path.parent.mkdir(parents=True, exist_ok=True)
        command = self.builder.build(spec, path)
        self.runner.execute(command, target=spec.describe())
        return path

    def _run_stage(self, stage: Stage, func, *args):
        try:
            return func(*args)
        except Exception as e:
            raise _StageFailed(stage, e) from e

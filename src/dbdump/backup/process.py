"""External process execution

Runs a dump command while draining its stdout and stderr on dedicated
threads. Dump tools write progress to stderr continuously (``-v``); if the
pipe is not read while we wait, the tool blocks once the pipe buffer fills.
"""

import os
import subprocess
import threading
from pathlib import Path
from typing import IO, List, Mapping, Optional

from dbdump.backup.commands import ExternalCommand
from dbdump.exceptions import ProcessError, StartError
from dbdump.logger import Logger


class ProcessRunner:
    """Executes ExternalCommands and classifies the result"""

    def __init__(self, logger: Logger, base_env: Optional[Mapping[str, str]] = None):
        """
        Args:
            logger: Receives every drained output line as it arrives
            base_env: Environment the command's env delta is merged into
                (default: the current process environment)
        """
        self.logger = logger
        self._base_env = base_env
        self._current: Optional[subprocess.Popen] = None
        # Reentrant: kill() is called from signal handlers on the main thread
        self._lock = threading.RLock()

    def execute(self, cmd: ExternalCommand, target: Optional[str] = None) -> None:
        """Run ``cmd`` to completion

        Args:
            cmd: Command to run
            target: Target description attached to drained log lines

        Raises:
            StartError: The process could not be started
            ProcessError: The process exited with a non-zero status
        """
        env = dict(os.environ if self._base_env is None else self._base_env)
        env.update(cmd.env)

        self.logger.info("Running command", command=" ".join(cmd.redacted_argv()), target=target)

        try:
            proc = subprocess.Popen(
                cmd.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                env=env,
            )
        except OSError as e:
            _discard_partial_output(cmd.output_path)
            raise StartError(
                f"Failed to start {cmd.program}: {e}",
                details={"program": cmd.program, "target": target},
            ) from e

        with self._lock:
            self._current = proc

        drains: List[threading.Thread] = [
            self._start_drain(proc.stderr, "stderr", target),
            self._start_drain(proc.stdout, "stdout", target),
        ]
        try:
            exit_code = proc.wait()
        except BaseException:
            # The drains only finish once the child closes its pipes
            self.kill()
            raise
        finally:
            for thread in drains:
                thread.join()
            with self._lock:
                self._current = None

        if exit_code != 0:
            raise ProcessError(cmd.program, exit_code, details={"target": target})

        self.logger.debug("Command finished", program=cmd.program, target=target)

    def kill(self) -> bool:
        """Kill the command currently running, if any

        Returns:
            True if a running process was signalled
        """
        with self._lock:
            proc = self._current
        if proc is None or proc.poll() is not None:
            return False
        self.logger.warning("Killing running command", pid=proc.pid)
        try:
            proc.kill()
        except ProcessLookupError:
            return False
        return True

    def _start_drain(self, stream: Optional[IO[bytes]], name: str, target: Optional[str]) -> threading.Thread:
        thread = threading.Thread(
            target=self._drain,
            args=(stream, name, target),
            name=f"drain-{name}",
            daemon=True,
        )
        thread.start()
        return thread

    def _drain(self, stream: Optional[IO[bytes]], name: str, target: Optional[str]) -> None:
        if stream is None:
            return
        log = self.logger.info if name == "stderr" else self.logger.debug
        with stream:
            for raw in iter(stream.readline, b""):
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                if line:
                    log(line, stream=name, target=target)


def _discard_partial_output(path: Optional[Path]) -> None:
    if path is None:
        return
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass

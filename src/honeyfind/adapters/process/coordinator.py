"""PID-file process coordinator implementing ProcessCoordinator."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import TYPE_CHECKING

import psutil

from honeyfind.core.exceptions import BackgroundJobError, JobAlreadyRunningError


if TYPE_CHECKING:
    from collections.abc import Sequence


logger = logging.getLogger(__name__)

# An empty PID file is a claim in progress for this long
CLAIM_GRACE_SECONDS = 5.0


class PidFileCoordinator:
    """Runs named jobs as detached processes tracked by PID files.

    Each job name owns ``<run_dir>/<name>.pid``. Starting a job claims
    the file with an exclusive create, so two invocations racing to
    start the same job cannot both win. The job's stderr goes to
    ``<run_dir>/<name>.log``, which each run starts afresh.

    Attributes:
        run_dir: Directory for PID and log files.
    """

    def __init__(self, run_dir: Path) -> None:
        """Initialize the coordinator.

        Args:
            run_dir: Directory for PID and log files.
        """
        self.run_dir = run_dir

    def pid_path(self, name: str) -> Path:
        """Get the PID file path for a job."""
        return self.run_dir / f"{name}.pid"

    def log_path(self, name: str) -> Path:
        """Get the log file path for a job."""
        return self.run_dir / f"{name}.log"

    def is_running(self, name: str) -> bool:
        """Return True if the job's PID file names a live process.

        Stale PID files (dead process, reused PID, abandoned claim) are
        removed as a side effect.

        Raises:
            BackgroundJobError: If the PID file cannot be read.
        """
        pid_path = self.pid_path(name)
        try:
            text = pid_path.read_text().strip()
            claimed_at = pid_path.stat().st_mtime
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BackgroundJobError(
                f"Cannot read PID file for job '{name}': {e}", name=name, cause=e
            ) from e

        if not text:
            if time.time() - claimed_at < CLAIM_GRACE_SECONDS:
                return True
            logger.debug("removing abandoned claim for job %s", name)
            pid_path.unlink(missing_ok=True)
            return False

        try:
            pid = int(text)
        except ValueError:
            logger.warning("removing unreadable PID file %s", pid_path)
            pid_path.unlink(missing_ok=True)
            return False

        if self._alive(pid, claimed_at):
            return True

        logger.debug("job %s (pid %d) is no longer running", name, pid)
        pid_path.unlink(missing_ok=True)
        return False

    @staticmethod
    def _alive(pid: int, claimed_at: float) -> bool:
        """Check pid is running and was started before the claim was written."""
        try:
            process = psutil.Process(pid)
            if process.status() == psutil.STATUS_ZOMBIE:
                return False
            # Allow for coarse filesystem timestamps
            return process.create_time() <= claimed_at + 1.0
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False

    def _claim(self, name: str) -> int:
        """Create the PID file exclusively and return its descriptor.

        Raises:
            JobAlreadyRunningError: If a live job already holds it.
            BackgroundJobError: If the run directory is unusable.
        """
        try:
            self.run_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackgroundJobError(
                f"Cannot create run directory for job '{name}': {e}", name=name, cause=e
            ) from e

        try:
            return self._create_pid_file(name)
        except FileExistsError:
            # is_running() removes the file if the holder is gone
            if self.is_running(name):
                raise JobAlreadyRunningError(name) from None
        except OSError as e:
            raise BackgroundJobError(
                f"Cannot claim job '{name}': {e}", name=name, cause=e
            ) from e

        try:
            return self._create_pid_file(name)
        except FileExistsError:
            raise JobAlreadyRunningError(name) from None
        except OSError as e:
            raise BackgroundJobError(
                f"Cannot claim job '{name}': {e}", name=name, cause=e
            ) from e

    def _create_pid_file(self, name: str) -> int:
        flags = os.O_CREAT | os.O_EXCL | os.O_WRONLY
        return os.open(self.pid_path(name), flags, 0o644)

    def run_detached(self, name: str, argv: Sequence[str]) -> None:
        """Start argv in a new session without waiting for it.

        Args:
            name: Job name.
            argv: Command line to run.

        Raises:
            JobAlreadyRunningError: If the job is already running.
            BackgroundJobError: If the process cannot be started.
        """
        fd = self._claim(name)
        try:
            with open(self.log_path(name), "wb") as log_file:
                process = subprocess.Popen(
                    list(argv),
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=log_file,
                    start_new_session=True,
                    close_fds=True,
                )
        except OSError as e:
            os.close(fd)
            self.pid_path(name).unlink(missing_ok=True)
            raise BackgroundJobError(
                f"Could not start job '{name}': {e}", name=name, cause=e
            ) from e

        with os.fdopen(fd, "w") as f:
            f.write(f"{process.pid}\n")

        logger.debug("started job %s (pid %d): %s", name, process.pid, " ".join(argv))

# src/aliaslookup/jobs/launcher.py — v1
"""Detached background job launching with one job per tag.

ProcessLauncher tracks jobs with ``<tag>.pid`` files. A tag is claimed by
creating its pid file exclusively, so two front-end processes racing to
start the same refresh cannot both spawn it. Pid files of dead processes
are removed lazily whenever a tag is checked.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from abc import ABC, abstractmethod
from datetime import timedelta
from pathlib import Path
from typing import Sequence

import psutil

from aliaslookup.core.errors import LaunchError

logger = logging.getLogger(__name__)


class BaseJobLauncher(ABC):
    """Interface for fire-and-forget background jobs keyed by tag."""

    @abstractmethod
    def is_running(self, tag: str) -> bool:
        """Return True while a job tagged tag executes."""

    @abstractmethod
    def run_detached(self, tag: str, argv: Sequence[str]) -> bool:
        """Start argv in the background under tag.

        Returns:
            True if the job was started, False if tag was already claimed.

        Raises:
            LaunchError: If the process cannot be spawned.
        """


class ProcessLauncher(BaseJobLauncher):
    """Spawns jobs as detached subprocesses tracked by pid files."""

    def __init__(
        self,
        jobs_dir: Path | str,
        grace_period: timedelta = timedelta(seconds=10),
    ) -> None:
        self._jobs_dir = Path(jobs_dir).expanduser()
        self._grace_period = grace_period

    def pid_path(self, tag: str) -> Path:
        return self._jobs_dir / f"{tag}.pid"

    def log_path(self, tag: str) -> Path:
        return self._jobs_dir / f"{tag}.log"

    def is_running(self, tag: str) -> bool:
        path = self.pid_path(tag)
        try:
            content = path.read_text(encoding="utf-8").strip()
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return False

        if not content:
            # Claimed but pid not written yet.
            if time.time() - mtime < self._grace_period.total_seconds():
                return True
            logger.warning("Removing abandoned claim for job %s", tag)
            path.unlink(missing_ok=True)
            return False

        try:
            pid = int(content)
        except ValueError:
            logger.warning("Removing unreadable pid file for job %s", tag)
            path.unlink(missing_ok=True)
            return False

        if _process_alive(pid):
            return True

        logger.debug("Job %s (pid %d) has exited", tag, pid)
        path.unlink(missing_ok=True)
        return False

    def run_detached(self, tag: str, argv: Sequence[str]) -> bool:
        self._jobs_dir.mkdir(parents=True, exist_ok=True)
        if self.is_running(tag):
            return False

        path = self.pid_path(tag)
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            logger.info("Job %s claimed by another process", tag)
            return False
        except OSError as e:
            raise LaunchError(tag, f"cannot create pid file: {e}") from e

        try:
            with open(self.log_path(tag), "ab") as log:
                proc = subprocess.Popen(  # noqa: S603
                    list(argv),
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=log,
                    start_new_session=True,
                    close_fds=True,
                )
        except (OSError, ValueError) as e:
            os.close(fd)
            path.unlink(missing_ok=True)
            raise LaunchError(tag, str(e)) from e

        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(str(proc.pid))
        logger.info("Started job %s (pid %d): %s", tag, proc.pid, " ".join(argv))
        return True


def _process_alive(pid: int) -> bool:
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.ZombieProcess:
        return False
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return psutil.pid_exists(pid)

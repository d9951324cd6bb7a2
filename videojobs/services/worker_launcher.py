# services/worker_launcher.py

"""
Worker launcher - starts the video worker as a detached OS process
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from videojobs.core.config import settings
from videojobs.core.errors import SpawnFailureError

logger = logging.getLogger(__name__)


class WorkerLauncher:
    """Fire-and-forget process launch.

    The child gets its own session so it outlives the request that started
    it, its stdio is detached, and the job id travels only through the
    environment. The launcher never waits on the child.
    """

    def __init__(
            self,
            command: Optional[List[str]] = None,
            cwd: Optional[str] = None,
            job_id_env_var: Optional[str] = None
    ):
        self.command = list(command or settings.worker_command)
        self.cwd = cwd or settings.worker_cwd
        self.job_id_env_var = job_id_env_var or settings.job_id_env_var

    def launch(self, job_id: str, state_file: Optional[Path] = None) -> int:
        """Start the worker for ``job_id`` and return its pid.

        ``state_file`` is exported through the settings variables so the
        worker opens the same document as the dispatcher.
        """
        env = dict(os.environ)
        env[self.job_id_env_var] = job_id
        if state_file is not None:
            state_file = Path(state_file).resolve()
            env["VIDEOJOBS_DATA_DIR"] = str(state_file.parent)
            env["VIDEOJOBS_STATE_FILENAME"] = state_file.name

        logger.info(f"Launching worker for job {job_id}: {' '.join(self.command)}")
        try:
            proc = subprocess.Popen(
                self.command,
                cwd=self.cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                start_new_session=True
            )
        except (OSError, ValueError) as e:
            raise SpawnFailureError(job_id, str(e)) from e

        logger.info(f"Worker for job {job_id} started with pid {proc.pid}")
        return proc.pid

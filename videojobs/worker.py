# worker.py

"""
Video job worker - run as ``python -m videojobs.worker`` with the job id in the environment.

Drives the configured render command for one job and reports progress
through the job registry: status transitions, streamed output lines as
logs, and the final result or error.
"""

import json
import logging
import os
import re
import subprocess
import sys
import threading
import time
from typing import Any, Dict, List, Optional

from videojobs.core.config import settings
from videojobs.core.errors import JobNotFoundError
from videojobs.core.logging import setup_logging
from videojobs.models.job import JobState
from videojobs.models.stage import STAGE_PARTITIONS, StageId
from videojobs.services.job_registry import JobRegistry
from videojobs.services.state_store import StateStore
from videojobs.utils.file_handler import utc_now_iso

logger = logging.getLogger(__name__)

RESULT_MARKER = "__VIDEO_RESULT__"
PLAYABLE_URL_RE = re.compile(r"^https?://\S+\.(mp4|mov|webm)(\?\S*)?$", re.IGNORECASE)


def parse_campaign_type(campaign_type: Optional[str]) -> Dict[str, str]:
    """'instagram-reel' -> platform 'instagram', format 'reel'"""
    parts = str(campaign_type or "instagram-reel").split("-")
    return {
        "platform": parts[0] or "instagram",
        "format": "-".join(parts[1:]) or "reel"
    }


def is_playable_video_url(url: Any) -> bool:
    return bool(PLAYABLE_URL_RE.match(str(url or "").strip()))


def parse_result_line(line: str) -> Optional[Dict[str, Any]]:
    """Extract the JSON payload following the result marker, if any"""
    index = line.find(RESULT_MARKER)
    if index < 0:
        return None
    try:
        payload = json.loads(line[index + len(RESULT_MARKER):].strip())
    except ValueError:
        logger.warning(f"Unparseable result line: {line}")
        return None
    return payload if isinstance(payload, dict) else None


def build_render_args(request: Dict[str, Any]) -> List[str]:
    """Command-line arguments for the render command derived from the job request"""
    campaign = parse_campaign_type(request.get("campaignType"))
    args = [
        "--topic", str(request.get("topic") or ""),
        "--language", str(request.get("language") or "english"),
        "--type", str(request.get("campaignType") or "instagram-reel"),
        "--platform", campaign["platform"],
        "--format", campaign["format"],
        "--duration", str(request.get("duration") or 15),
        "--aspect-ratio", str(request.get("aspectRatio") or "9:16"),
        "--wait-for-completion",
    ]

    if request.get("useVeo"):
        args.append("--use-veo")

    if request.get("useAvatar"):
        args.append("--use-avatar")
        if request.get("avatarId"):
            args += ["--avatar-id", str(request["avatarId"])]
        if request.get("avatarVoiceId"):
            args += ["--avatar-voice-id", str(request["avatarVoiceId"])]
        if request.get("avatarScriptText"):
            args += ["--avatar-script", str(request["avatarScriptText"])]
    else:
        args.append("--no-avatar")

    return args


class VideoJobWorker:
    def __init__(
            self,
            job_id: str,
            registry: Optional[JobRegistry] = None,
            render_command: Optional[List[str]] = None
    ):
        self.job_id = job_id
        self.registry = registry or JobRegistry()
        self.store: StateStore = self.registry.store
        self.render_command = list(render_command if render_command is not None else settings.render_command)
        self.video_result: Optional[Dict[str, Any]] = None
        self.output: List[str] = []

    def run(self) -> int:
        """Execute the job; returns the process exit code for the worker"""
        job = self.registry.get(self.job_id)
        self.registry.update(self.job_id, {
            "status": JobState.RUNNING.value,
            "startedAt": utc_now_iso(),
            "logs": ["Starting video generation worker"]
        })

        if not self.render_command:
            self._fail("No render command configured")
            return 1

        command = self.render_command + build_render_args(job.request)
        self.registry.append_log(self.job_id, f"Running: {' '.join(command)}")

        exit_code = self._run_render(command)
        direct_url = (self.video_result or {}).get("directVideoUrl") or (self.video_result or {}).get("videoUrl")

        if exit_code == 0 and is_playable_video_url(direct_url):
            self._save_video_entry(job.request, exit_code)
            self.registry.update(self.job_id, {
                "status": JobState.COMPLETED.value,
                "finishedAt": utc_now_iso(),
                "result": {**self.video_result, "stageSaved": True},
                "logs": ["Video job completed successfully"]
            })
            return 0

        dashboard = (self.video_result or {}).get("dashboardUrl")
        if dashboard:
            error = f"Video URL not ready yet. Track status: {dashboard}"
        else:
            error = f"Video generation failed (exit code {exit_code})"
        self._fail(error, result=self.video_result, log="Video job failed or URL not ready")
        return 1

    def _run_render(self, command: List[str]) -> int:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1
        )

        stderr_reader = threading.Thread(target=self._consume, args=(proc.stderr, "WARN: "), daemon=True)
        stderr_reader.start()
        self._consume(proc.stdout, "")
        stderr_reader.join()

        return proc.wait()

    def _consume(self, stream, prefix: str):
        for raw in stream:
            line = raw.strip()
            if not line:
                continue
            self.output.append(raw)
            self.registry.append_log(self.job_id, f"{prefix}{line}")
            parsed = parse_result_line(line)
            if parsed is not None:
                self.video_result = parsed
        stream.close()

    def _save_video_entry(self, request: Dict[str, Any], exit_code: int):
        """Record the finished video in the production stage partition"""
        result = self.video_result or {}
        entry_id = f"{int(StageId.PRODUCTION)}-{int(time.time() * 1000)}"
        entry = {
            "id": entry_id,
            "stageId": int(StageId.PRODUCTION),
            "type": "video-production",
            "jobId": self.job_id,
            "topic": request.get("topic"),
            "campaignType": request.get("campaignType"),
            "platforms": request.get("platforms") or [],
            "duration": request.get("duration"),
            "useVeo": request.get("useVeo"),
            "useAvatar": request.get("useAvatar"),
            "avatarId": request.get("avatarId") or None,
            "avatarScriptText": request.get("avatarScriptText") or None,
            "avatarVoiceId": request.get("avatarVoiceId") or None,
            "status": "completed",
            "output": "".join(self.output),
            "hostedUrl": result.get("hostedUrl"),
            "videoUrl": result.get("videoUrl"),
            "directVideoUrl": result.get("directVideoUrl"),
            "dashboardUrl": result.get("dashboardUrl"),
            "videoId": result.get("videoId"),
            "videoStatus": result.get("status"),
            "completedAt": utc_now_iso(),
        }
        entry = {k: v for k, v in entry.items() if v is not None}
        self.store.upsert(STAGE_PARTITIONS[StageId.PRODUCTION], entry_id, entry)
        logger.info(f"Saved video entry {entry_id} for job {self.job_id}")

    def _fail(self, error: str, result: Optional[Dict[str, Any]] = None, log: Optional[str] = None):
        patch: Dict[str, Any] = {
            "status": JobState.FAILED.value,
            "finishedAt": utc_now_iso(),
            "error": error,
            "logs": [log or error]
        }
        if result is not None:
            patch["result"] = result
        self.registry.update(self.job_id, patch)
        logger.error(f"Job {self.job_id} failed: {error}")


def main() -> int:
    setup_logging()
    job_id = os.environ.get(settings.job_id_env_var, "").strip()
    if not job_id:
        logger.error(f"{settings.job_id_env_var} is not set")
        return 1

    worker = VideoJobWorker(job_id)
    try:
        return worker.run()
    except JobNotFoundError:
        logger.error(f"Job {job_id} does not exist")
        return 1
    except Exception as e:
        logger.error(f"Fatal worker error for job {job_id}: {e}", exc_info=True)
        worker.registry.update(job_id, {
            "status": JobState.FAILED.value,
            "finishedAt": utc_now_iso(),
            "error": str(e) or "Unknown worker error",
            "logs": [f"Fatal worker error: {e}"]
        })
        return 1


if __name__ == "__main__":
    sys.exit(main())

# services/dispatcher.py

"""
Job dispatcher - validates submissions, queues a job record and hands it to a worker
"""

import logging
from typing import Any, Dict, Optional

from videojobs.core.config import settings
from videojobs.core.errors import SpawnFailureError, SubmissionValidationError
from videojobs.models.job import JobRecord, JobState, JobSubmission, new_job_id
from videojobs.services.job_registry import JobRegistry
from videojobs.services.worker_launcher import WorkerLauncher
from videojobs.utils.file_handler import utc_now_iso

logger = logging.getLogger(__name__)


class JobDispatcher:
    def __init__(
            self,
            registry: Optional[JobRegistry] = None,
            launcher: Optional[WorkerLauncher] = None,
            supported_stage_id: Optional[int] = None,
            mark_failed_on_spawn_error: Optional[bool] = None
    ):
        self.registry = registry or JobRegistry()
        self.launcher = launcher or WorkerLauncher()
        self.supported_stage_id = (
            settings.supported_stage_id if supported_stage_id is None else supported_stage_id
        )
        self.mark_failed_on_spawn_error = (
            settings.mark_failed_on_spawn_error
            if mark_failed_on_spawn_error is None
            else mark_failed_on_spawn_error
        )

    def validate(self, body: Any) -> JobSubmission:
        """Check the submission body; raises SubmissionValidationError"""
        if not isinstance(body, dict):
            raise SubmissionValidationError("Request body must be a JSON object")

        topic = body.get("topic")
        topic = topic.strip() if isinstance(topic, str) else ""
        if not topic:
            raise SubmissionValidationError("topic is required")

        stage_id = body.get("stageId")
        if stage_id is None:
            stage_id = self.supported_stage_id
        if isinstance(stage_id, str) and stage_id.strip().isdigit():
            stage_id = int(stage_id.strip())
        if not isinstance(stage_id, int) or isinstance(stage_id, bool) or stage_id != self.supported_stage_id:
            raise SubmissionValidationError(
                f"Only stageId={self.supported_stage_id} is supported for video jobs"
            )

        return JobSubmission(topic=topic, stage_id=stage_id)

    def submit(self, body: Dict[str, Any]) -> JobRecord:
        """Queue a video job and launch its worker without waiting on it"""
        submission = self.validate(body)

        record = JobRecord(
            id=new_job_id(),
            status=JobState.QUEUED.value,
            created_at=utc_now_iso(),
            request=body,
            logs=["Queued video job"]
        )
        record = self.registry.create(record)
        logger.info(f"Queued job {record.id} for topic '{submission.topic}'")

        try:
            self.launcher.launch(record.id, state_file=self.registry.store.state_file)
        except SpawnFailureError as e:
            if not self.mark_failed_on_spawn_error:
                logger.error(f"{e.message}; job {record.id} stays queued")
            else:
                logger.error(e.message)
                record = self.registry.update(record.id, {
                    "status": JobState.FAILED.value,
                    "finishedAt": utc_now_iso(),
                    "error": e.message,
                    "logs": ["Worker could not be started"]
                })

        return record

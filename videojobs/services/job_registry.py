# services/job_registry.py

"""
Job registry - video job records kept in the ``jobs`` partition of the state store
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from videojobs.core.errors import DuplicateJobError, JobNotFoundError, JobUpdateError
from videojobs.models.job import JobRecord
from videojobs.models.stage import JOBS_PARTITION
from videojobs.services.state_store import StateStore
from videojobs.utils.file_handler import utc_now_iso

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "createdAt")


class JobRegistry:
    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or StateStore()

    def create(self, record: JobRecord) -> JobRecord:
        """Insert a new job; fails if the id is already registered"""
        document = record.to_document()
        document.setdefault("updatedAt", document["createdAt"])

        if not self.store.insert(JOBS_PARTITION, record.id, document):
            raise DuplicateJobError(record.id)

        logger.info(f"Created job {record.id} with status '{record.status}'")
        return JobRecord.model_validate(document)

    def update(self, job_id: str, patch: Dict[str, Any]) -> JobRecord:
        """Merge ``patch`` into a job; ``logs`` in the patch are appended"""
        patch = {k: v for k, v in patch.items() if k not in IMMUTABLE_FIELDS}
        new_logs = patch.pop("logs", None)
        if isinstance(new_logs, str):
            new_logs = [new_logs]

        def apply(current: Dict[str, Any]) -> Dict[str, Any]:
            merged = {**current, **patch}
            if new_logs:
                merged["logs"] = list(current.get("logs") or []) + list(new_logs)
            merged["updatedAt"] = utc_now_iso()
            try:
                JobRecord.model_validate(merged)
            except ValidationError as e:
                raise JobUpdateError(job_id, str(e)) from e
            return merged

        updated = self.store.mutate(JOBS_PARTITION, job_id, apply)
        if updated is None:
            raise JobNotFoundError(job_id)

        if "status" in patch:
            logger.info(f"Job {job_id} -> {patch['status']}")
        return JobRecord.model_validate(updated)

    def append_log(self, job_id: str, *lines: str) -> JobRecord:
        entries = [str(line).strip() for line in lines if line is not None]
        entries = [line for line in entries if line]
        return self.update(job_id, {"logs": entries})

    def get(self, job_id: str) -> JobRecord:
        document = self.store.get(JOBS_PARTITION, job_id)
        if document is None:
            raise JobNotFoundError(job_id)
        return JobRecord.model_validate(document)

    def list_jobs(self, status: Optional[str] = None) -> List[JobRecord]:
        """All jobs, newest first, optionally filtered by status"""
        documents = self.store.read().get(JOBS_PARTITION, {}).values()
        jobs = [JobRecord.model_validate(doc) for doc in documents]
        if status:
            jobs = [job for job in jobs if job.status == status]
        return sorted(jobs, key=lambda job: job.created_at, reverse=True)

# models/job.py

"""
Job-related data models
"""

import secrets
import time
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobState(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = {JobState.COMPLETED.value, JobState.FAILED.value}


def new_job_id() -> str:
    """video-<epoch millis>-<8 hex chars>"""
    return f"video-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class JobRecord(BaseModel):
    """One video job as persisted in the ``jobs`` partition.

    ``status`` stays a plain string: workers may write their own progress
    labels on top of the four states in ``JobState``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    status: str = JobState.QUEUED.value
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    started_at: Optional[str] = Field(None, alias="startedAt")
    finished_at: Optional[str] = Field(None, alias="finishedAt")
    request: Dict[str, Any] = {}
    logs: List[str] = []
    result: Optional[Any] = None
    error: Optional[Any] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def to_document(self) -> Dict[str, Any]:
        """camelCase dict as stored on disk and returned by the API"""
        return self.model_dump(by_alias=True, exclude_none=True)


class JobSubmission(BaseModel):
    """Validated view of a submission body; the raw body is kept on the record"""

    topic: str
    stage_id: int

# models/__init__.py

from .job import JobState, JobRecord, JobSubmission, TERMINAL_STATES, new_job_id
from .stage import (
    StageId,
    StageDataResponse,
    STAGE_PARTITIONS,
    JOBS_PARTITION,
    KNOWN_PARTITIONS
)

__all__ = [
    'JobState',
    'JobRecord',
    'JobSubmission',
    'TERMINAL_STATES',
    'new_job_id',
    'StageId',
    'StageDataResponse',
    'STAGE_PARTITIONS',
    'JOBS_PARTITION',
    'KNOWN_PARTITIONS'
]

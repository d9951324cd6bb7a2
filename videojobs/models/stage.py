# models/stage.py

"""
Workflow stage models
"""

from enum import IntEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class StageId(IntEnum):
    PLANNING = 1
    CONTENT = 2
    VISUALS = 3
    PRODUCTION = 4
    PUBLISHING = 5
    ANALYTICS = 6


STAGE_PARTITIONS = {
    StageId.PLANNING: "campaigns",
    StageId.CONTENT: "content",
    StageId.VISUALS: "visuals",
    StageId.PRODUCTION: "videos",
    StageId.PUBLISHING: "published",
    StageId.ANALYTICS: "metrics",
}

JOBS_PARTITION = "jobs"

KNOWN_PARTITIONS = tuple(STAGE_PARTITIONS.values()) + (JOBS_PARTITION,)


class StageDataResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    summary: Dict[str, Any]

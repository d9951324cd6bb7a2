# routers/job_router.py

"""
Video Job API Routes
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from videojobs.services.dispatcher import JobDispatcher
from videojobs.services.job_registry import JobRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/video-jobs", tags=["Video Jobs"])


def get_job_registry() -> JobRegistry:
    return JobRegistry()


def get_job_dispatcher(registry: JobRegistry = Depends(get_job_registry)) -> JobDispatcher:
    return JobDispatcher(registry=registry)


@router.post("")
def submit_video_job(
        body: Any = Body(None),
        dispatcher: JobDispatcher = Depends(get_job_dispatcher)
) -> Dict[str, Any]:
    """Queue a video job and start its worker in the background"""
    logger.info("POST /api/video-jobs - Received video job submission")
    logger.debug(f"Submission body: {body}")

    job = dispatcher.submit(body)

    logger.info(f"Video job {job.id} accepted with status '{job.status}'")
    return {"ok": True, "jobId": job.id}


@router.get("")
def list_video_jobs(
        status: Optional[str] = Query(None, description="Only jobs with this status"),
        registry: JobRegistry = Depends(get_job_registry)
) -> Dict[str, Any]:
    """List known video jobs, newest first"""
    jobs = registry.list_jobs(status=status)
    return {"jobs": [job.to_document() for job in jobs]}


@router.get("/{job_id}")
def get_video_job(job_id: str, registry: JobRegistry = Depends(get_job_registry)) -> Dict[str, Any]:
    """Poll a single job's status and logs"""
    job = registry.get(job_id.strip())
    return {"job": job.to_document()}

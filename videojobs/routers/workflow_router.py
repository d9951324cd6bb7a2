# routers/workflow_router.py

"""
Workflow Stage Data API Routes
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from videojobs.core.errors import StageRequestError
from videojobs.models.stage import StageDataResponse
from videojobs.services.stage_service import StageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workflow", tags=["Workflow"])


def get_stage_service() -> StageService:
    return StageService()


@router.get("/data", response_model=StageDataResponse)
def get_stage_data(
        stage: Optional[str] = Query(None, description="Stage id (1-6)"),
        service: StageService = Depends(get_stage_service)
):
    """Fetch a stage's stored entries with summary statistics"""
    logger.info(f"GET /api/workflow/data - stage={stage}")
    if not stage:
        raise StageRequestError("Stage ID required")

    return service.get_stage(stage)


@router.post("/data/save")
def save_stage_data(
        body: Any = Body(None),
        service: StageService = Depends(get_stage_service)
) -> Dict[str, Any]:
    """Apply edits to one stored stage entry"""
    if not isinstance(body, dict):
        raise StageRequestError("Missing or invalid stageId, dataId, or editedData")

    logger.info(f"POST /api/workflow/data/save - stage={body.get('stageId')}, id={body.get('dataId')}")
    service.save_entry(body.get("stageId"), body.get("dataId"), body.get("editedData"))
    return {"ok": True}

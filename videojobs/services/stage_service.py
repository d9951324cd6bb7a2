# services/stage_service.py

"""
Stage data service - read-only stage views over the workflow state, plus entry edits
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from videojobs.core.errors import StageEntryNotFoundError, StageRequestError
from videojobs.models.stage import STAGE_PARTITIONS, StageId
from videojobs.services.state_store import StateStore
from videojobs.utils.file_handler import utc_now_iso

logger = logging.getLogger(__name__)


def _distinct(values: Iterable[Any]) -> List[Any]:
    """Distinct values in first-seen order"""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _summarize_campaigns(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalCampaigns": total,
        "activeCampaigns": sum(1 for c in entries if c.get("status") != "completed")
    }


def _summarize_content(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalContent": total,
        "contentTypes": _distinct(c.get("type") or "unknown" for c in entries)
    }


def _summarize_visuals(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalVisuals": total,
        "visualTypes": _distinct(v.get("type") or "unknown" for v in entries)
    }


def _summarize_videos(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalVideos": total,
        "completedVideos": sum(1 for v in entries if v.get("status") == "completed")
    }


def _summarize_published(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalPosts": total,
        "publishedPlatforms": _distinct(p.get("platform") for p in entries)
    }


def _summarize_metrics(total: int, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalMetrics": total,
        "trackedPlatforms": _distinct(m.get("platform") or "unknown" for m in entries)
    }


SUMMARIZERS: Dict[StageId, Callable[[int, List[Dict[str, Any]]], Dict[str, Any]]] = {
    StageId.PLANNING: _summarize_campaigns,
    StageId.CONTENT: _summarize_content,
    StageId.VISUALS: _summarize_visuals,
    StageId.PRODUCTION: _summarize_videos,
    StageId.PUBLISHING: _summarize_published,
    StageId.ANALYTICS: _summarize_metrics,
}


def parse_stage_id(value: Any) -> Optional[StageId]:
    """Map a raw stage id (int or numeric string) to a known stage, else None"""
    if isinstance(value, bool):
        return None
    try:
        return StageId(int(str(value).strip()))
    except ValueError:
        return None


class StageService:
    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or StateStore()

    def get_stage(self, stage_id: Any) -> Dict[str, Any]:
        """Stage partition contents plus derived summary statistics"""
        if not self.store.exists():
            logger.info("Workflow state not initialised yet")
            return {"data": None, "summary": {"message": "No campaigns yet"}}

        state = self.store.read()
        stage = parse_stage_id(stage_id)
        if stage is None:
            logger.info(f"Stage data requested for unknown stage '{stage_id}'")
            return {"data": {}, "summary": {"message": "Stage data not available"}}

        data = state.get(STAGE_PARTITIONS[stage], {})
        entries = [entry for entry in data.values() if isinstance(entry, dict)]
        summary = SUMMARIZERS[stage](len(data), entries)

        logger.debug(f"Stage {int(stage)} summary: {summary}")
        return {"data": data, "summary": summary}

    def save_entry(self, stage_id: Any, data_id: Any, edited_data: Any) -> Dict[str, Any]:
        """Merge user edits into an existing stage entry"""
        stage = parse_stage_id(stage_id) if isinstance(stage_id, int) else None
        if stage is None or not data_id or not isinstance(edited_data, dict):
            raise StageRequestError("Missing or invalid stageId, dataId, or editedData")

        data_id = str(data_id)
        partition = STAGE_PARTITIONS[stage]

        def apply(current: Dict[str, Any]) -> Dict[str, Any]:
            return {
                **current,
                **edited_data,
                "id": data_id,
                "stageId": int(stage),
                "completedAt": current.get("completedAt") or utc_now_iso()
            }

        updated = self.store.mutate(partition, data_id, apply)
        if updated is None:
            raise StageEntryNotFoundError(int(stage), data_id)

        logger.info(f"Saved edits to {partition}/{data_id}")
        return updated

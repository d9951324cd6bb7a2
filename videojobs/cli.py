#!/usr/bin/env python3
"""
videojobs command line - submit and inspect video jobs without the HTTP API.

Examples:
  videojobs submit --topic "Q1 review" --campaign-type instagram-reel
  videojobs status video-1700000000000-abcdef12
  videojobs list --status queued
  videojobs stage 4
  videojobs stale --minutes 30
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from videojobs.core.errors import OrchestratorError
from videojobs.core.logging import setup_logging
from videojobs.models.job import JobRecord, JobState
from videojobs.services.dispatcher import JobDispatcher
from videojobs.services.job_registry import JobRegistry
from videojobs.services.stage_service import StageService
from videojobs.services.state_store import StateStore

log = logging.getLogger("videojobs.cli")


def print_json(data: Any):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def find_stale_jobs(registry: JobRegistry, minutes: int, now: Optional[datetime] = None) -> List[JobRecord]:
    """Queued jobs older than ``minutes`` - usually a worker that never started"""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(minutes=minutes)
    stale = []
    for job in registry.list_jobs(status=JobState.QUEUED.value):
        created = datetime.fromisoformat(job.created_at.replace("Z", "+00:00"))
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        if created < cutoff:
            stale.append(job)
    return stale


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Video job orchestrator command line.")
    parser.add_argument("--state-file", help="Workflow state file (default: from settings).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG.")
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Queue a video job and launch its worker.")
    submit.add_argument("--topic", required=True, help="Video topic.")
    submit.add_argument("--stage-id", type=int, default=4, help="Workflow stage (only 4 is supported).")
    submit.add_argument("--campaign-type", default="instagram-reel", help="<platform>-<format>.")
    submit.add_argument("--duration", type=int, default=15, help="Target duration in seconds.")
    submit.add_argument("--language", default="english", help="Narration language.")

    status = sub.add_parser("status", help="Show one job.")
    status.add_argument("job_id")

    listing = sub.add_parser("list", help="List jobs, newest first.")
    listing.add_argument("--status", help="Only jobs with this status.")

    stage = sub.add_parser("stage", help="Show a stage's data and summary.")
    stage.add_argument("stage_id")

    stale = sub.add_parser("stale", help="List queued jobs that never started.")
    stale.add_argument("--minutes", type=int, default=30, help="Age threshold in minutes.")
    return parser


def run(args) -> int:
    levels = {0: "WARNING", 1: "INFO"}
    setup_logging(levels.get(args.verbose, "DEBUG"))

    store = StateStore(args.state_file) if args.state_file else StateStore()
    registry = JobRegistry(store)

    if args.command == "submit":
        job = JobDispatcher(registry=registry).submit({
            "topic": args.topic,
            "stageId": args.stage_id,
            "campaignType": args.campaign_type,
            "duration": args.duration,
            "language": args.language,
        })
        print_json({"ok": True, "jobId": job.id})
    elif args.command == "status":
        print_json({"job": registry.get(args.job_id).to_document()})
    elif args.command == "list":
        print_json({"jobs": [job.to_document() for job in registry.list_jobs(status=args.status)]})
    elif args.command == "stage":
        print_json(StageService(store).get_stage(args.stage_id))
    elif args.command == "stale":
        jobs = find_stale_jobs(registry, args.minutes)
        print_json({"jobs": [job.to_document() for job in jobs]})
        return 1 if jobs else 0
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except OrchestratorError as e:
        print_json({"error": e.message})
        return 2 if e.status_code < 500 else 1


if __name__ == "__main__":
    sys.exit(main())

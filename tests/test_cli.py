import json
from datetime import datetime, timezone

from videojobs import cli
from videojobs.models.job import JobRecord


def _job(job_id, created_at, status="queued"):
    return JobRecord(id=job_id, status=status, created_at=created_at, request={"topic": "x"})


def test_status_and_list(registry, state_file, capsys):
    registry.create(_job("video-1-aaaaaaaa", "2026-01-01T00:00:00+00:00"))

    assert cli.main(["--state-file", str(state_file), "status", "video-1-aaaaaaaa"]) == 0
    assert json.loads(capsys.readouterr().out)["job"]["status"] == "queued"

    assert cli.main(["--state-file", str(state_file), "list", "--status", "completed"]) == 0
    assert json.loads(capsys.readouterr().out) == {"jobs": []}


def test_unknown_job_prints_error(state_file, capsys):
    assert cli.main(["--state-file", str(state_file), "status", "video-0-missing"]) == 2
    assert json.loads(capsys.readouterr().out) == {"error": "Job not found"}


def test_stage_command(store, state_file, capsys):
    store.upsert("videos", "4-1", {"status": "completed"})

    assert cli.main(["--state-file", str(state_file), "stage", "4"]) == 0
    assert json.loads(capsys.readouterr().out)["summary"] == {"totalVideos": 1, "completedVideos": 1}


def test_submit_rejects_unsupported_stage(state_file, capsys):
    assert cli.main(["--state-file", str(state_file), "submit", "--topic", "x", "--stage-id", "2"]) == 2
    assert "stageId=4" in json.loads(capsys.readouterr().out)["error"]
    assert not state_file.exists()


def test_find_stale_jobs(registry):
    registry.create(_job("video-1-old", "2026-01-01T00:00:00+00:00"))
    registry.create(_job("video-2-new", "2026-01-01T00:50:00+00:00"))
    registry.create(_job("video-3-done", "2026-01-01T00:00:00+00:00", status="completed"))

    now = datetime(2026, 1, 1, 1, 0, tzinfo=timezone.utc)
    stale = cli.find_stale_jobs(registry, minutes=30, now=now)

    assert [job.id for job in stale] == ["video-1-old"]

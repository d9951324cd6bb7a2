import pytest

from videojobs.core.errors import DuplicateJobError, JobNotFoundError, JobUpdateError
from videojobs.models.job import JobRecord, JobState


def _record(job_id="video-1-abcdef12", created_at="2026-01-01T00:00:00+00:00"):
    return JobRecord(
        id=job_id,
        created_at=created_at,
        request={"topic": "Q1 review", "stageId": 4},
        logs=["Queued video job"]
    )


def test_create_then_get(registry):
    created = registry.create(_record())
    fetched = registry.get(created.id)

    assert fetched.status == JobState.QUEUED.value
    assert fetched.request == {"topic": "Q1 review", "stageId": 4}
    assert fetched.logs == ["Queued video job"]
    assert fetched.updated_at == fetched.created_at


def test_create_duplicate_id_fails(registry):
    registry.create(_record())

    with pytest.raises(DuplicateJobError):
        registry.create(_record())


def test_get_unknown_job_raises(registry):
    with pytest.raises(JobNotFoundError):
        registry.get("video-0-missing")


def test_update_unknown_job_raises(registry):
    with pytest.raises(JobNotFoundError):
        registry.update("video-0-missing", {"status": "running"})


def test_update_appends_logs_instead_of_replacing(registry):
    job = registry.create(_record())

    registry.update(job.id, {"status": "running", "logs": ["Starting"]})
    updated = registry.update(job.id, {"logs": ["Rendering scene 1", "Rendering scene 2"]})

    assert updated.status == "running"
    assert updated.logs == ["Queued video job", "Starting", "Rendering scene 1", "Rendering scene 2"]


def test_repeated_log_patch_grows_logs(registry):
    job = registry.create(_record())

    registry.update(job.id, {"logs": ["tick"]})
    registry.update(job.id, {"logs": ["tick"]})

    assert registry.get(job.id).logs == ["Queued video job", "tick", "tick"]


def test_update_cannot_change_identity_fields(registry):
    job = registry.create(_record())

    updated = registry.update(job.id, {"id": "other", "createdAt": "1999-01-01", "status": "running"})

    assert updated.id == job.id
    assert updated.created_at == job.created_at
    assert updated.updated_at != job.created_at


def test_update_preserves_custom_fields_and_status_labels(registry):
    job = registry.create(_record())

    updated = registry.update(job.id, {"status": "rendering-avatar", "progress": 0.5})

    assert updated.status == "rendering-avatar"
    assert updated.to_document()["progress"] == 0.5
    assert updated.is_terminal is False


def test_append_log_skips_blank_lines(registry):
    job = registry.create(_record())

    registry.append_log(job.id, "  first  ", "", "   ", "second")

    assert registry.get(job.id).logs == ["Queued video job", "first", "second"]


def test_list_jobs_newest_first_with_status_filter(registry):
    registry.create(_record("video-1-aaaaaaaa", "2026-01-01T00:00:00+00:00"))
    registry.create(_record("video-2-bbbbbbbb", "2026-01-02T00:00:00+00:00"))
    registry.update("video-1-aaaaaaaa", {"status": "completed"})

    assert [job.id for job in registry.list_jobs()] == ["video-2-bbbbbbbb", "video-1-aaaaaaaa"]
    assert [job.id for job in registry.list_jobs(status="completed")] == ["video-1-aaaaaaaa"]


def test_document_uses_camel_case_keys(registry):
    job = registry.create(_record())

    document = job.to_document()

    assert {"id", "status", "createdAt", "updatedAt", "request", "logs"} <= set(document)
    assert "created_at" not in document


def test_worker_result_and_error_accept_any_json(registry):
    job = registry.create(_record())

    updated = registry.update(job.id, {"status": "completed", "result": "https://cdn.example.com/v.mp4"})
    assert updated.result == "https://cdn.example.com/v.mp4"

    updated = registry.update(job.id, {"error": {"code": 3, "reason": "provider timeout"}})
    assert registry.get(job.id).error == {"code": 3, "reason": "provider timeout"}


def test_unreadable_patch_is_rejected_without_writing(registry, state_file):
    job = registry.create(_record())
    before = state_file.read_bytes()

    with pytest.raises(JobUpdateError):
        registry.update(job.id, {"status": "completed", "startedAt": 12345})
    with pytest.raises(JobUpdateError):
        registry.update(job.id, {"status": {"nested": True}})

    assert state_file.read_bytes() == before
    assert registry.get(job.id).status == "queued"


def test_single_string_log_is_one_entry(registry):
    job = registry.create(_record())

    assert registry.update(job.id, {"logs": "Rendering"}).logs == ["Queued video job", "Rendering"]

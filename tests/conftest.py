import pytest
from fastapi.testclient import TestClient

from videojobs.core.config import settings
from videojobs.services.job_registry import JobRegistry
from videojobs.services.state_store import StateStore


class RecordingLauncher:
    """Stands in for WorkerLauncher; remembers which jobs it was asked to start"""

    def __init__(self, error=None):
        self.launched = []
        self.state_files = []
        self.error = error

    def launch(self, job_id, state_file=None):
        self.state_files.append(state_file)
        if self.error is not None:
            raise self.error
        self.launched.append(job_id)
        return 4242


@pytest.fixture()
def state_file(tmp_path):
    return tmp_path / "data" / "workflow-state.json"


@pytest.fixture()
def store(state_file):
    return StateStore(state_file)


@pytest.fixture()
def registry(store):
    return JobRegistry(store)


@pytest.fixture()
def launcher():
    return RecordingLauncher()


@pytest.fixture()
def client(tmp_path, monkeypatch, launcher):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))

    from videojobs.main import app
    from videojobs.routers import job_router
    from videojobs.services.dispatcher import JobDispatcher

    app.dependency_overrides[job_router.get_job_dispatcher] = (
        lambda: JobDispatcher(registry=JobRegistry(), launcher=launcher)
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()

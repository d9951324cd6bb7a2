# services/__init__.py

from .state_store import StateStore
from .job_registry import JobRegistry
from .worker_launcher import WorkerLauncher
from .dispatcher import JobDispatcher
from .stage_service import StageService

__all__ = ['StateStore', 'JobRegistry', 'WorkerLauncher', 'JobDispatcher', 'StageService']

# core/errors.py

"""
Orchestrator error types.

Every error carries the HTTP status it maps to so the API layer can
translate it into an ``{"error": ...}`` body without knowing the cause.
"""


class OrchestratorError(Exception):
    """Base exception for all orchestrator failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SubmissionValidationError(OrchestratorError):
    """Raised when a job submission is malformed or targets an unsupported stage."""

    status_code = 400


class StageRequestError(OrchestratorError):
    """Raised when a stage query or stage edit is malformed."""

    status_code = 400


class DuplicateJobError(OrchestratorError):
    """Raised when creating a job whose id is already registered."""

    status_code = 409

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job already exists: {job_id}")


class JobNotFoundError(OrchestratorError):
    """Raised when a job cannot be found in the registry."""

    status_code = 404

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("Job not found")


class StageEntryNotFoundError(OrchestratorError):
    """Raised when editing a stage entry that does not exist."""

    status_code = 404

    def __init__(self, stage_id: int, data_id: str):
        self.stage_id = stage_id
        self.data_id = data_id
        super().__init__("Stage entry not found")


class CorruptStateError(OrchestratorError):
    """Raised when the workflow state document cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Workflow state file is corrupt: {path} ({reason})")


class SpawnFailureError(OrchestratorError):
    """Raised when the worker process could not be launched."""

    def __init__(self, job_id: str, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Failed to launch worker for job {job_id}: {reason}")


class JobUpdateError(OrchestratorError):
    """Raised when a patch would leave a job record unreadable."""

    status_code = 400

    def __init__(self, job_id: str, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Invalid update for job {job_id}: {reason}")

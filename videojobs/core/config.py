# core/config.py

"""
Application Configuration
"""

import sys
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Video Job Orchestrator"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # State Settings
    data_dir: str = "data"
    state_filename: str = "workflow-state.json"

    # Job Settings
    supported_stage_id: int = 4
    job_id_env_var: str = "VIDEO_JOB_ID"
    mark_failed_on_spawn_error: bool = False

    # Worker Settings
    worker_command: List[str] = [sys.executable, "-m", "videojobs.worker"]
    worker_cwd: str = "."
    render_command: List[str] = []

    @property
    def state_file(self) -> Path:
        return Path(self.data_dir) / self.state_filename

    class Config:
        env_prefix = "VIDEOJOBS_"
        case_sensitive = False


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance"""
    return settings

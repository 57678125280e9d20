from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Paths
    base_dir: Path = Path(__file__).resolve().parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "jobs.duckdb"
    form_template_path: Path = data_dir / "application_form.yaml"

    # Server
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Tally form service
    tally_api_url: str = "https://api.tally.so"
    tally_api_key: str = ""
    tally_timeout: float = 15.0  # seconds; a timeout counts as a failed submission
    default_form_status: Literal["PUBLISHED", "DRAFT"] = "PUBLISHED"

    model_config = {"env_prefix": "JOBBOARD_"}


settings = Settings()

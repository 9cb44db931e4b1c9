"""
Application configuration and settings
"""

import os
from dataclasses import dataclass
from typing import Optional

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from veoforge.core.runtime import env_deadline, env_float, env_int, parse_bool_env
from veoforge.models.status import ProgressMode, Quality

from .constants import *  # noqa: F401,F403
from .constants import __all__ as _constants_all

API_TITLE = "VeoForge API"
API_VERSION = "1.0.0"

DEFAULT_VEO_MODELS = {
    Quality.STANDARD: "veo-3.1-fast-generate-preview",
    Quality.HIGH: "veo-3.1-generate-preview",
}


def _parse_progress_mode(raw: Optional[str]) -> ProgressMode:
    value = (raw or "").strip().lower()
    try:
        return ProgressMode(value)
    except ValueError:
        return ProgressMode.AUTO


@dataclass(frozen=True)
class VeoSettings:
    """Runtime settings for the upstream client and the orchestrator."""

    gemini_api_key: Optional[str] = None
    use_vertex_ai: bool = False
    gcp_project_id: Optional[str] = None
    gcp_location: str = "us-central1"
    model_standard: str = DEFAULT_VEO_MODELS[Quality.STANDARD]
    model_high: str = DEFAULT_VEO_MODELS[Quality.HIGH]
    aspect_ratio: str = "16:9"
    status_poll_interval: float = 1.0
    sequential_wait_timeout: Optional[float] = 900.0
    max_parallel_submissions: int = 4
    progress_mode: ProgressMode = ProgressMode.AUTO
    log_level: str = "INFO"
    log_json: bool = False

    def model_for(self, quality: Quality) -> str:
        return self.model_high if quality is Quality.HIGH else self.model_standard


def load_settings() -> VeoSettings:
    """Build settings from the current environment."""
    return VeoSettings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        use_vertex_ai=parse_bool_env(os.getenv("USE_VERTEX_AI")),
        gcp_project_id=os.getenv("GCP_PROJECT_ID") or None,
        gcp_location=os.getenv("GCP_LOCATION", "us-central1"),
        model_standard=os.getenv("VEO_MODEL_STANDARD", DEFAULT_VEO_MODELS[Quality.STANDARD]),
        model_high=os.getenv("VEO_MODEL_HIGH", DEFAULT_VEO_MODELS[Quality.HIGH]),
        aspect_ratio=os.getenv("VEO_ASPECT_RATIO", "16:9"),
        status_poll_interval=env_float("STATUS_POLL_INTERVAL_SECONDS", 1.0, minimum=0.05),
        sequential_wait_timeout=env_deadline("SEQUENTIAL_WAIT_TIMEOUT_SECONDS", 900.0),
        max_parallel_submissions=env_int("MAX_PARALLEL_SUBMISSIONS", 4, 1),
        progress_mode=_parse_progress_mode(os.getenv("PROGRESS_MODE")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=parse_bool_env(os.getenv("LOG_JSON")),
    )


__all__ = [
    "API_TITLE",
    "API_VERSION",
    "DEFAULT_VEO_MODELS",
    "VeoSettings",
    "load_settings",
    *_constants_all,
]

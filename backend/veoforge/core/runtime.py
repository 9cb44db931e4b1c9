"""
Runtime environment guards and typed environment readers.
"""

import os
from typing import Dict, Optional


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(int(raw), minimum)
    except (TypeError, ValueError):
        return default


def env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), minimum)
    except (TypeError, ValueError):
        return default


def env_deadline(name: str, default: Optional[float]) -> Optional[float]:
    """Read a deadline in seconds; zero or a negative value disables it."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else None


def upstream_credentials_report(
    *,
    use_vertex_ai: bool,
    api_key: Optional[str],
    project_id: Optional[str],
) -> Dict[str, object]:
    """Describe which upstream backend is configured and what is missing."""
    if use_vertex_ai:
        missing = [] if project_id else ["GCP_PROJECT_ID"]
        backend = "vertex_ai"
    else:
        missing = [] if api_key else ["GEMINI_API_KEY"]
        backend = "gemini_api"
    return {
        "backend": backend,
        "missing": missing,
        "ok": not missing,
    }

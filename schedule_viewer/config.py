from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from solution_core.hours import OVERTIME_TOLERANCE_HOURS
from solution_core.preferences import ShiftWishPolicy, resolve_policy


@dataclass(frozen=True)
class RuntimeConfig:
    base_url: str
    case_id: int | None
    timeout_s: float
    retries: int
    overtime_tolerance_hours: float
    shift_wish_policy: ShiftWishPolicy
    log_level: str


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'") from None


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got '{raw}'") from None


def runtime_config() -> RuntimeConfig:
    base_url = os.getenv("SCHEDULE_VIEWER_BASE_URL", "http://localhost:3000/api").rstrip("/")
    return RuntimeConfig(
        base_url=base_url,
        case_id=_env_int("SCHEDULE_VIEWER_CASE_ID", None),
        timeout_s=_env_float("SCHEDULE_VIEWER_TIMEOUT_S", 30.0),
        retries=max(1, _env_int("SCHEDULE_VIEWER_RETRIES", 3) or 1),
        overtime_tolerance_hours=_env_float(
            "SCHEDULE_VIEWER_OVERTIME_TOLERANCE", OVERTIME_TOLERANCE_HOURS
        ),
        shift_wish_policy=resolve_policy(os.getenv("SCHEDULE_VIEWER_SHIFT_WISH_POLICY") or None),
        log_level=os.getenv("SCHEDULE_VIEWER_LOG_LEVEL", "INFO").upper(),
    )


def require_case_id(case_id: int | None, cfg: RuntimeConfig) -> int:
    """Explicit case id, else the configured default."""
    resolved = case_id if case_id is not None else cfg.case_id
    if resolved is None:
        raise ValueError(
            "No case selected. Pass case_id or set SCHEDULE_VIEWER_CASE_ID."
        )
    return resolved

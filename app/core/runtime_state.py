"""In-process state reported by the health endpoint."""
from __future__ import annotations

from typing import Any

from app.utils.time import utcnow

_scheduler_active = False
_last_replay: dict[str, Any] | None = None


def set_scheduler_active(active: bool) -> None:
    global _scheduler_active
    _scheduler_active = active


def is_scheduler_active() -> bool:
    return _scheduler_active


def record_replay_run(candidates: int, reconciled: int) -> None:
    """Remember the outcome of the latest failed-delivery replay."""

    global _last_replay
    _last_replay = {
        "at": utcnow().isoformat(),
        "candidates": candidates,
        "reconciled": reconciled,
    }


def last_replay_run() -> dict[str, Any] | None:
    return dict(_last_replay) if _last_replay is not None else None

"""Capture and expose startup diagnostic events (pool warm-up, configuration gaps)."""
from datetime import datetime, timezone
from typing import Dict, List, Optional

_startup_events: List[Dict] = []


def record_startup_event(kind: str, message: str, **extra):
    _startup_events.append({
        "ts": datetime.now(timezone.utc).isoformat(),
        "kind": kind,
        "message": message,
        **extra,
    })


def get_startup_events(limit: int = 100, kind: Optional[str] = None):
    events = _startup_events if kind is None else [e for e in _startup_events if e["kind"] == kind]
    return events[-limit:] if limit > 0 else []


def clear_startup_events():
    _startup_events.clear()

__all__ = ["record_startup_event", "get_startup_events", "clear_startup_events"]

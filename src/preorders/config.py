"""Runtime settings for the pre-orders context, read from the environment."""

import os
from datetime import time


def get_environment() -> str:
    """Name of the active environment (test, development, staging, production)."""
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_order_cutoff() -> time:
    """Local time after which shops can no longer place orders for the day."""
    raw = os.getenv("PREORDERS_CUTOFF", "22:00")
    try:
        return time.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"PREORDERS_CUTOFF must be HH:MM, got {raw!r}") from exc


def get_reconcile_attempts() -> int:
    """How many times a serialized command is retried on a version conflict."""
    attempts = int(os.getenv("PREORDERS_RECONCILE_ATTEMPTS", "3"))
    return max(attempts, 1)


def get_log_dir() -> str:
    return os.getenv("LOG_DIR", "logs")

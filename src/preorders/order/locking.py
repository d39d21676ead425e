"""Serialization of order mutations per (shop, calendar day).

Order placement and reconciliation for the same shop and day must not
interleave their read of the day's orders with another writer. Each such
command runs under a process-wide lock for its key, and optimistic version
conflicts reported by the store are retried a bounded number of times.
"""

import threading
from contextlib import contextmanager
from datetime import date, timedelta

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from preorders.config import get_reconcile_attempts
from preorders.exceptions import ConcurrencyConflict
from preorders.utils.logging import get_logger, logging_context

logger = get_logger(__name__)

_locks: dict[tuple[str, date], threading.Lock] = {}
_registry_lock = threading.Lock()


def _lock_for(shop_key: str, day: date) -> threading.Lock:
    with _registry_lock:
        # Keys older than yesterday can no longer be contended
        stale = [key for key in _locks if key[1] < day - timedelta(days=1)]
        for key in stale:
            if not _locks[key].locked():
                del _locks[key]
        return _locks.setdefault((str(shop_key), day), threading.Lock())


@contextmanager
def shop_day_lock(shop_key: str, day: date):
    lock = _lock_for(shop_key, day)
    with lock:
        yield


def process_serialized(command, shop_key: str, day: date, attempts: int | None = None):
    """Process ``command`` synchronously while holding the (shop, day) lock.

    The unit of work opened by the command handler commits before the lock is
    released. Raises ``ConcurrencyConflict`` once ``attempts`` version
    conflicts have been seen.
    """
    attempts = attempts or get_reconcile_attempts()

    with shop_day_lock(shop_key, day), logging_context(shop_key=str(shop_key), day=day.isoformat()):
        for attempt in range(1, attempts + 1):
            try:
                return current_domain.process(command, asynchronous=False)
            except ExpectedVersionError as exc:
                logger.warning(
                    "Version conflict while processing command",
                    command=command.__class__.__name__,
                    attempt=attempt,
                    error=str(exc),
                )

    raise ConcurrencyConflict(
        f"Gave up after {attempts} conflicting attempts for shop {shop_key} on {day.isoformat()}",
        details={"shop_key": str(shop_key), "day": day.isoformat(), "attempts": attempts},
    )

"""Ordering window and calendar-day helpers.

Both are pure functions of their inputs so the cutoff rule and the "today"
range can be exercised without a real clock.
"""

from datetime import datetime, time, timedelta

from preorders.config import get_order_cutoff
from preorders.shop.shop import Role


def is_order_window_open(role, at: datetime, cutoff: time | None = None) -> bool:
    """Admins may order at any time; shops only strictly before the cutoff."""
    if Role(role) == Role.ADMIN:
        return True
    cutoff = cutoff or get_order_cutoff()
    return at.time() < cutoff


def day_bounds(at: datetime) -> tuple[datetime, datetime]:
    """The local calendar day containing ``at`` as ``[midnight, midnight + 24h)``."""
    start = datetime.combine(at.date(), time.min, tzinfo=at.tzinfo)
    return start, start + timedelta(days=1)

"""Error kinds raised by the pre-orders context.

These are independent of the transport; the API layer maps each kind to an
HTTP status in ``preorders.api.errors``.
"""

from typing import Any, Optional


class PreordersError(Exception):
    """Base exception for all pre-orders errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFound(PreordersError):
    """An order, product, or shop could not be resolved."""


class Forbidden(PreordersError):
    """A non-admin caller attempted an admin-only operation."""


class OrderWindowClosed(PreordersError):
    """A shop tried to place an order after the daily cutoff."""

    def __init__(self, cutoff, requested_at):
        super().__init__(
            message=f"Daily ordering window closed at {cutoff.strftime('%H:%M')}. Please order tomorrow.",
            details={"cutoff": cutoff.isoformat(), "requested_at": requested_at.isoformat()},
        )


class ValidationFailed(PreordersError):
    """Input rejected before touching any aggregate."""


class InvalidTransition(PreordersError):
    """The requested status change is not allowed from the current status."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot transition from {current} to {target}",
            details={"current": current, "target": target},
        )


class ConcurrencyConflict(PreordersError):
    """Retries were exhausted while contending for the same shop and day."""

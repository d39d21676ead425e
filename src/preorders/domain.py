"""Pre-orders bounded context: shop orders against the bakery's daily tray catalog.

Handles order placement under the daily cutoff, role-scoped listing, status
transitions, and the admin reconciliation that forces a shop's committed
quantity of one product for the current day to a target value.
"""

from protean.domain import Domain

from preorders.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
preorders = Domain(name="preorders")

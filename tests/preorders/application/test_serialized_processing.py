"""Application tests for per-shop, per-day command serialization."""

import threading
from datetime import date, datetime

import pytest
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from preorders.domain import preorders
from preorders.exceptions import ConcurrencyConflict
from preorders.order import locking, services
from preorders.order.order import Order
from preorders.order.reconciliation import ReconcileDailyQuantity


def _command(target=3):
    return ReconcileDailyQuantity(
        caller="admin",
        shop_name="lale",
        product_id="p-1",
        target_quantity=target,
        requested_at=datetime(2026, 3, 10, 12, 0),
    )


class TestShopDayLock:
    def test_same_key_shares_a_lock(self):
        day = date(2026, 3, 10)
        assert locking._lock_for("shop-1", day) is locking._lock_for("shop-1", day)

    def test_different_days_use_different_locks(self):
        assert locking._lock_for("shop-1", date(2026, 3, 10)) is not locking._lock_for("shop-1", date(2026, 3, 11))

    def test_lock_is_held_inside_the_block(self):
        day = date(2026, 3, 10)
        with locking.shop_day_lock("shop-2", day):
            assert locking._lock_for("shop-2", day).locked()
        assert not locking._lock_for("shop-2", day).locked()

    def test_second_writer_waits_for_the_first(self):
        day = date(2026, 3, 10)
        entered = []

        def contender():
            with locking.shop_day_lock("shop-3", day):
                entered.append("contender")

        with locking.shop_day_lock("shop-3", day):
            thread = threading.Thread(target=contender)
            thread.start()
            thread.join(timeout=0.2)
            assert entered == []

        thread.join(timeout=2)
        assert entered == ["contender"]


class TestVersionConflicts:
    def test_conflict_is_retried(self, monkeypatch):
        calls = []

        def flaky_process(command, asynchronous=False):
            calls.append(command)
            if len(calls) == 1:
                raise ExpectedVersionError("stale order")
            return "done"

        monkeypatch.setattr(preorders, "process", flaky_process)

        assert locking.process_serialized(_command(), "shop-4", date(2026, 3, 10), attempts=3) == "done"
        assert len(calls) == 2

    def test_exhausted_retries_raise_concurrency_conflict(self, monkeypatch):
        def always_stale(command, asynchronous=False):
            raise ExpectedVersionError("stale order")

        monkeypatch.setattr(preorders, "process", always_stale)

        with pytest.raises(ConcurrencyConflict) as exc:
            locking.process_serialized(_command(), "shop-5", date(2026, 3, 10), attempts=2)
        assert exc.value.details["attempts"] == 2

    def test_attempts_come_from_environment(self, monkeypatch):
        monkeypatch.setenv("PREORDERS_RECONCILE_ATTEMPTS", "4")
        calls = []

        def always_stale(command, asynchronous=False):
            calls.append(command)
            raise ExpectedVersionError("stale order")

        monkeypatch.setattr(preorders, "process", always_stale)

        with pytest.raises(ConcurrencyConflict):
            locking.process_serialized(_command(), "shop-6", date(2026, 3, 10))
        assert len(calls) == 4


class TestConcurrentReconciliation:
    def test_parallel_targets_settle_on_one_of_them(self, admin, shop, baklava):
        errors = []

        def reconcile(target):
            try:
                with preorders.domain_context():
                    services.reconcile_daily_quantity(
                        caller="admin",
                        shop_name="lale",
                        product_id=baklava,
                        target_quantity=target,
                        requested_at=datetime(2026, 3, 10, 12, 0),
                    )
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=reconcile, args=(target,)) for target in (2, 5, 2, 5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        orders = current_domain.repository_for(Order).find_for_shop_newest_first(shop.id)
        total = sum(order.quantity_of(baklava) for order in orders if order.status != "CANCELLED")
        assert total in (2, 5)


class TestOrderPlacementLockKey:
    def test_own_order_locks_on_the_callers_shop(self, shop, baklava, make_shop, monkeypatch):
        # Another shop whose display name equals lale's account name
        make_shop("decoy", "lale")
        keys = []

        def record(command, shop_key, day, attempts=None):
            keys.append(shop_key)
            return current_domain.process(command, asynchronous=False)

        monkeypatch.setattr(services, "process_serialized", record)
        services.place_order(
            caller="lale",
            items=[{"product_id": baklava, "quantity": 1}],
            requested_at=datetime(2026, 3, 10, 9, 0),
        )
        services.place_order(
            caller="lale",
            items=[{"product_id": baklava, "quantity": 1}],
            shop_name="lale",
            requested_at=datetime(2026, 3, 10, 9, 0),
        )

        assert keys == [str(shop.id), str(shop.id)]

    def test_admin_order_for_a_shop_locks_on_that_shop(self, admin, shop, baklava, monkeypatch):
        keys = []

        def record(command, shop_key, day, attempts=None):
            keys.append(shop_key)
            return current_domain.process(command, asynchronous=False)

        monkeypatch.setattr(services, "process_serialized", record)
        services.place_order(
            caller="admin",
            items=[{"product_id": baklava, "quantity": 1}],
            shop_name="Lale Pastanesi",
            requested_at=datetime(2026, 3, 10, 9, 0),
        )

        assert keys == [str(shop.id)]


class TestPlacementAgainstReconciliation:
    def test_placement_waits_for_a_reconciliation_in_progress(self, admin, shop, baklava, make_shop):
        make_shop("decoy", "lale")
        placed = threading.Event()
        errors = []

        def place():
            try:
                with preorders.domain_context():
                    services.place_order(
                        caller="lale",
                        items=[{"product_id": baklava, "quantity": 1}],
                        requested_at=datetime(2026, 3, 10, 9, 0),
                    )
                placed.set()
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        # The key a reconciliation for lale takes on that day
        with locking.shop_day_lock(services._shop_key("Lale Pastanesi"), date(2026, 3, 10)):
            worker = threading.Thread(target=place)
            worker.start()
            assert not placed.wait(timeout=0.3)

        worker.join(timeout=10)
        assert errors == []
        assert placed.is_set()

    def test_concurrent_placements_and_reconciliation_keep_a_consistent_total(self, admin, shop, baklava):
        errors = []

        def place():
            try:
                with preorders.domain_context():
                    services.place_order(
                        caller="lale",
                        items=[{"product_id": baklava, "quantity": 1}],
                        requested_at=datetime(2026, 3, 10, 9, 0),
                    )
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        def reconcile():
            try:
                with preorders.domain_context():
                    services.reconcile_daily_quantity(
                        caller="admin",
                        shop_name="Lale Pastanesi",
                        product_id=baklava,
                        target_quantity=3,
                        requested_at=datetime(2026, 3, 10, 9, 0),
                    )
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=fn) for fn in (place, reconcile, place)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        orders = current_domain.repository_for(Order).find_for_shop_newest_first(shop.id)
        total = sum(order.quantity_of(baklava) for order in orders if order.status != "CANCELLED")
        # Placements after the reconciliation add on top of its target
        assert total in (3, 4, 5)

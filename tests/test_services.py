"""
test_services.py: Status tables, load retries, the in-flight guard, the
category catalog and the row view models.
"""

import pytest
from fastapi import HTTPException

from gem_admin.services import catalog
from gem_admin.services.inflight import InFlightGuard
from gem_admin.services.retry import load_with_retry
from gem_admin.services.status import (
    CONSULTATION_TRANSITIONS,
    ORDER_TARGETS,
    ORDER_TRANSITIONS,
    ConsultationStatus,
    InvalidStatus,
    OrderStatus,
    can_transition,
    consultation_wire_value,
    parse_status,
    status_options,
)
from gem_admin.services.view_models import consultation_row, order_row, product_row, rows, video_row
from gem_admin.utils.api_client import ApiError, NotFoundError


class TestStatus:
    """Tests for the status enums and transition tables."""

    def test_parse_any_case(self):
        assert parse_status(OrderStatus, "shipped") is OrderStatus.SHIPPED
        assert parse_status(ConsultationStatus, "Completed") is ConsultationStatus.COMPLETED

    def test_parse_unknown(self):
        with pytest.raises(InvalidStatus):
            parse_status(OrderStatus, "lost")

    def test_orders_can_move_to_any_offered_target(self):
        for current in OrderStatus:
            for target in ORDER_TARGETS:
                assert can_transition(ORDER_TRANSITIONS, current, target)

    def test_orders_cannot_return_to_pending(self):
        assert not can_transition(ORDER_TRANSITIONS, OrderStatus.SHIPPED, OrderStatus.PENDING)

    def test_consultations_are_unconstrained(self):
        assert can_transition(CONSULTATION_TRANSITIONS, ConsultationStatus.COMPLETED, ConsultationStatus.PENDING)

    def test_consultation_wire_value_is_capitalized(self):
        assert consultation_wire_value(ConsultationStatus.SCHEDULED) == "Scheduled"

    def test_status_options_labels(self):
        options = {o["value"]: o["label"] for o in status_options(ConsultationStatus)}
        assert options["bad"] == "Bad Lead"
        assert options["future"] == "Keeping this for future"
        assert options["pending"] == "Pending"


class TestLoadWithRetry:
    """Tests for load_with_retry."""

    def test_retries_transient_failures_with_growing_delay(self):
        calls, waits = [], []

        def load():
            calls.append(1)
            if len(calls) < 3:
                raise ApiError("Server error", 503)
            return {"success": True}

        assert load_with_retry(load, attempts=2, delay=2.0, sleep=waits.append) == {"success": True}
        assert len(calls) == 3
        assert waits == [2.0, 4.0]

    def test_gives_up_after_attempts(self):
        calls = []

        def load():
            calls.append(1)
            raise ApiError("Unable to reach the server")

        with pytest.raises(ApiError):
            load_with_retry(load, attempts=2, delay=0, sleep=lambda s: None)
        assert len(calls) == 3

    def test_client_errors_are_not_retried(self):
        calls = []

        def load():
            calls.append(1)
            raise NotFoundError("Product not found", 404)

        with pytest.raises(NotFoundError):
            load_with_retry(load, attempts=2, delay=0, sleep=lambda s: None)
        assert len(calls) == 1


class TestInFlightGuard:
    """Tests for InFlightGuard."""

    def test_duplicate_action_rejected(self):
        guard = InFlightGuard()
        with guard.hold("delete-product", "p1"):
            assert guard.is_active("delete-product", "p1")
            with pytest.raises(HTTPException) as exc:
                with guard.hold("delete-product", "p1"):
                    pass
            assert exc.value.status_code == 409
            # A different record is independent
            with guard.hold("delete-product", "p2"):
                pass
        assert not guard.is_active("delete-product", "p1")

    def test_released_after_error(self):
        guard = InFlightGuard()
        with pytest.raises(RuntimeError):
            with guard.hold("order-status", "o1"):
                raise RuntimeError("boom")
        assert not guard.is_active("order-status", "o1")


class TestCatalog:
    """Tests for the static category catalog."""

    def test_known_category_image(self):
        assert catalog.category_image("blue-sapphire") == f"{catalog.CATEGORY_IMAGE_BASE}/blue-sapphire.png"

    def test_unknown_category_image(self):
        assert catalog.category_image("unobtanium") == ""
        assert catalog.category_image(None) == ""

    def test_catalog_options(self):
        options = catalog.catalog_options()
        values = [o["value"] for o in options["primaryCategories"]]
        assert "ruby" in values
        ruby = next(o for o in options["primaryCategories"] if o["value"] == "ruby")
        assert ruby["label"] == "Ruby"
        assert ruby["image"] == catalog.CATEGORY_IMAGES["ruby"]


class TestViewModels:
    """Tests for the row mappers."""

    def test_product_row(self):
        row = product_row({
            "_id": "p9",
            "name": "Emerald",
            "originalPrice": 5000,
            "discountedPrice": 4500,
            "primaryCategory": "emerald",
            "isAvailable": False,
        })
        assert row["id"] == "p9"
        assert row["price"] == 4500
        assert row["category"] == "emerald"
        assert row["status"] == "inactive"

    def test_product_row_defaults_available(self):
        row = product_row({"_id": "p1", "originalPrice": 100})
        assert row["price"] == 100
        assert row["status"] == "active"

    def test_order_row(self):
        row = order_row({
            "_id": "o1",
            "user": {"name": "Asha", "email": "asha@example.com"},
            "totalAmount": 1200,
            "status": "Shipped",
            "createdAt": "2024-01-01",
        })
        assert row == {
            "id": "o1",
            "customer": "Asha",
            "email": "asha@example.com",
            "date": "2024-01-01",
            "total": 1200,
            "status": "shipped",
            "items": [],
        }

    def test_consultation_row(self):
        row = consultation_row({
            "_id": "b1",
            "name": "Kiran",
            "phoneNumber": "98765",
            "birthPlace": "Jaipur",
            "purpose": "Career",
            "dateOfBirth": "1990-05-01",
            "timeOfBirth": "06:30",
            "status": "Pending",
            "createdAt": "2024-02-02",
        })
        assert row["phone"] == "98765"
        assert row["company"] == "Jaipur"
        assert row["service"] == "Career"
        assert row["preferredDate"] == "1990-05-01"
        assert row["preferredTime"] == "06:30"
        assert row["status"] == "pending"
        assert row["submittedAt"] == "2024-02-02"

    def test_video_row(self):
        row = video_row({"_id": "v1", "video": "https://cdn.test/v.mp4", "title": "Intro", "size": 2048})
        assert row["url"] == "https://cdn.test/v.mp4"
        assert row["id"] == "v1"

    def test_rows_skips_non_records(self):
        assert rows(None, product_row) == []
        assert len(rows([{"_id": "a"}, "junk"], product_row)) == 1

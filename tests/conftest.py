"""Shared fixtures for order document tests."""

from datetime import datetime
from typing import Any

import pytest

from services.documents.schema import OrderDocumentRequest
from services.shared.config import Settings


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """Order payload in the shape the CRM front end sends."""
    return {
        "orderNumber": "ORD-1001",
        "orderDate": "2025-03-01",
        "sellerParty": {"code": "S1", "name": "Acme"},
        "buyerParty": {"code": "B1", "name": "Beta Co"},
        "product": {"code": "P1", "name": "Almonds", "variety": "Nonpareil"},
        "quantity": 1000,
        "unit": "lbs",
        "unitPrice": 4.50,
        "total": 4500,
        "agent": {"code": "A1", "name": "Dana"},
    }


@pytest.fixture
def order(order_payload: dict[str, Any]) -> OrderDocumentRequest:
    """Validated order without optional address, contact or notes."""
    return OrderDocumentRequest.model_validate(order_payload)


@pytest.fixture
def full_order(order_payload: dict[str, Any]) -> OrderDocumentRequest:
    """Order with every optional field filled in."""
    payload = dict(order_payload)
    payload["sellerParty"] = {
        "code": "S1",
        "name": "Acme",
        "address": "1 Orchard Rd, Fresno, CA",
        "contact": "Sam Seller",
    }
    payload["buyerParty"] = {
        "code": "B1",
        "name": "Beta Co",
        "address": "9 Harbor St, Oakland, CA",
        "contact": "Bo Buyer",
    }
    payload["product"] = {
        "code": "P1",
        "name": "Almonds",
        "variety": "Nonpareil",
        "grade": "Extra No. 1",
    }
    payload["commission"] = {"rate": 2.5, "amount": 112.5}
    payload["notes"] = "Ship in two lots."
    return OrderDocumentRequest.model_validate(payload)


@pytest.fixture
def generated_at() -> datetime:
    """Fixed footer timestamp."""
    return datetime(2025, 3, 2, 14, 5, 7)


@pytest.fixture
def storage_settings() -> Settings:
    """Create test settings with storage fully configured."""
    return Settings(
        _env_file=None,
        storage_endpoint="localhost:9000",
        storage_access_key="test-access-key",
        storage_secret_key="test-secret-key",
        storage_bucket="test-orders",
        storage_secure=False,
    )


@pytest.fixture
def inline_settings() -> Settings:
    """Create test settings without storage configuration."""
    return Settings(
        _env_file=None,
        storage_access_key="",
        storage_secret_key="",
        storage_bucket="",
    )

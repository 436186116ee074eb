"""Unit tests for order document data models."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from pydantic import ValidationError

from services.documents.schema import (
    DocumentRole,
    OrderDocumentRequest,
    Party,
    RenderedDocument,
)


class TestOrderDocumentRequest:
    """Test order request validation."""

    def test_accepts_front_end_payload(self, order: OrderDocumentRequest) -> None:
        """Should map camelCase payload keys onto model fields."""
        assert order.order_number == "ORD-1001"
        assert order.order_date == date(2025, 3, 1)
        assert order.seller.name == "Acme"
        assert order.buyer.name == "Beta Co"
        assert order.unit_price == Decimal("4.5")
        assert order.quantity == Decimal("1000")
        assert order.commission is None
        assert order.notes is None

    def test_accepts_legacy_payload_keys(self, order_payload: dict[str, Any]) -> None:
        """Should accept orderNo/date/seller/buyer/price keys."""
        payload = {
            "orderNo": "ORD-7",
            "date": "2025-01-15T08:30:00Z",
            "seller": order_payload["sellerParty"],
            "buyer": order_payload["buyerParty"],
            "product": order_payload["product"],
            "quantity": 10,
            "unit": "kg",
            "price": 2,
            "total": 20,
            "agent": order_payload["agent"],
        }

        order = OrderDocumentRequest.model_validate(payload)

        assert order.order_number == "ORD-7"
        assert order.order_date == date(2025, 1, 15)
        assert order.unit_price == Decimal("2")

    def test_accepts_field_names(self, order: OrderDocumentRequest) -> None:
        """Should round-trip through its own field names."""
        again = OrderDocumentRequest.model_validate(order.model_dump(mode="json"))
        assert again == order

    def test_missing_required_field(self, order_payload: dict[str, Any]) -> None:
        """Should reject an order without a buyer."""
        del order_payload["buyerParty"]

        with pytest.raises(ValidationError):
            OrderDocumentRequest.model_validate(order_payload)

    def test_blank_optional_fields_are_absent(self, order_payload: dict[str, Any]) -> None:
        """Should treat empty strings as missing optional values."""
        order_payload["notes"] = "   "
        order_payload["sellerParty"] = {"code": "S1", "name": "Acme", "address": ""}

        order = OrderDocumentRequest.model_validate(order_payload)

        assert order.notes is None
        assert order.seller.address is None

    def test_total_is_not_recomputed(self, order_payload: dict[str, Any]) -> None:
        """Should keep the caller's total even when it disagrees with quantity x price."""
        order_payload["total"] = 1
        order_payload["quantity"] = -5

        order = OrderDocumentRequest.model_validate(order_payload)

        assert order.total == Decimal("1")
        assert order.quantity == Decimal("-5")

    def test_is_immutable(self, order: OrderDocumentRequest) -> None:
        """Should reject attribute assignment after validation."""
        with pytest.raises(ValidationError):
            order.notes = "changed"  # type: ignore[misc]

    def test_party_for_role(self, order: OrderDocumentRequest) -> None:
        """Should resolve own party and counterparty per role."""
        assert order.party_for(DocumentRole.SELLER).code == "S1"
        assert order.counterparty_for(DocumentRole.SELLER).code == "B1"
        assert order.party_for(DocumentRole.BUYER).code == "B1"
        assert order.counterparty_for(DocumentRole.BUYER).code == "S1"


class TestDocumentRole:
    """Test document role enumeration."""

    def test_exactly_two_roles(self) -> None:
        assert [r.value for r in DocumentRole] == ["seller", "buyer"]

    def test_from_value(self) -> None:
        assert DocumentRole("buyer") is DocumentRole.BUYER


def test_party_optional_fields() -> None:
    """Party only requires code and name."""
    party = Party(code="X", name="Xylo")
    assert party.address is None
    assert party.contact is None


def test_rendered_document_filename() -> None:
    """Filename follows {role}-{orderNumber}.pdf."""
    document = RenderedDocument(content=b"%PDF", order_number="ORD-1", role=DocumentRole.BUYER)

    assert document.filename == "buyer-ORD-1.pdf"
    assert document.media_type == "application/pdf"
    assert document.storage_reference is None

"""Order document data models.

Input records are assembled per request by the caller from the CRM order
data and are immutable once validated. Field aliases accept the camelCase
payloads sent by the CRM front end as well as the Python field names.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PDF_MEDIA_TYPE = "application/pdf"


class DocumentRole(str, Enum):
    """Point of view a confirmation is prepared for."""

    SELLER = "seller"
    BUYER = "buyer"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Blank optional strings are treated as absent so they are not rendered.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Party(_FrozenModel):
    """Seller or buyer account on an order."""

    code: str = Field(..., description="Short account identifier")
    name: str = Field(..., description="Account display name")
    address: str | None = Field(None, description="Postal address")
    contact: str | None = Field(None, description="Contact person or details")


class Product(_FrozenModel):
    """Product sold on an order."""

    code: str
    name: str
    variety: str | None = None
    grade: str | None = None


class Agent(_FrozenModel):
    """Brokering agent, shown on both sides of an order."""

    code: str
    name: str


class Commission(_FrozenModel):
    """Agent commission. Accepted but never rendered."""

    rate: Decimal
    amount: Decimal


class OrderDocumentRequest(_FrozenModel):
    """Everything needed to render one order confirmation.

    The renderer trusts the supplied figures: ``total`` is not recomputed
    from ``quantity * unit_price`` and signs are not checked.
    """

    order_number: str = Field(
        ...,
        validation_alias=AliasChoices("order_number", "orderNumber", "orderNo"),
        description="Order identifier, echoed into the document and storage keys",
    )
    order_date: date = Field(
        ...,
        validation_alias=AliasChoices("order_date", "orderDate", "date"),
    )
    seller: Party = Field(..., validation_alias=AliasChoices("seller", "sellerParty"))
    buyer: Party = Field(..., validation_alias=AliasChoices("buyer", "buyerParty"))
    product: Product
    quantity: Decimal
    unit: str
    unit_price: Decimal = Field(
        ...,
        validation_alias=AliasChoices("unit_price", "unitPrice", "price"),
    )
    total: Decimal
    agent: Agent
    commission: Commission | None = None
    notes: str | None = None

    @field_validator("order_date", mode="before")
    @classmethod
    def _parse_order_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value

    def party_for(self, role: DocumentRole) -> Party:
        """Return the party a document for ``role`` is addressed to."""
        return self.seller if role is DocumentRole.SELLER else self.buyer

    def counterparty_for(self, role: DocumentRole) -> Party:
        """Return the other side of the order for ``role``."""
        return self.buyer if role is DocumentRole.SELLER else self.seller


class RenderedDocument(BaseModel):
    """Rendered PDF plus the metadata callers need to deliver it.

    Attributes:
        content: PDF bytes
        order_number: Order the document was rendered for
        role: Point of view of the document
        media_type: MIME type of ``content``
        storage_reference: Pre-signed URL or inline data URL, if persisted
    """

    model_config = ConfigDict(frozen=True)

    content: bytes
    order_number: str
    role: DocumentRole
    media_type: str = PDF_MEDIA_TYPE
    storage_reference: str | None = None

    @property
    def filename(self) -> str:
        return f"{self.role.value}-{self.order_number}.pdf"

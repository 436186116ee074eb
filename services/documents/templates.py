"""HTML layout for order confirmations.

A single Jinja2 template serves both document roles; everything that differs
between the seller and buyer copies lives in a ``RoleTheme``. The environment
autoescapes every interpolated value, so user-entered account and contact
data can never inject markup into the rendered page.

Number and date formatting follows en-US conventions:
- quantities and amounts use grouped thousands with up to 3 fraction digits
- unit prices always show exactly 2 decimals, without grouping
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from services.documents.schema import DocumentRole, OrderDocumentRequest, Party

TEMPLATE_DIR = Path(__file__).parent / "html"
ORDER_CONFIRMATION_TEMPLATE = "order_confirmation.html"


@dataclass(frozen=True)
class RoleTheme:
    """Role-specific presentation of an order confirmation."""

    role: DocumentRole
    title: str
    accent: str
    accent_light: str

    @property
    def party_label(self) -> str:
        return "Seller" if self.role is DocumentRole.SELLER else "Buyer"

    @property
    def counterparty_label(self) -> str:
        return "Buyer" if self.role is DocumentRole.SELLER else "Seller"


THEMES: dict[DocumentRole, RoleTheme] = {
    DocumentRole.SELLER: RoleTheme(
        role=DocumentRole.SELLER,
        title="SELLER ORDER CONFIRMATION",
        accent="#1e40af",
        accent_light="#3b82f6",
    ),
    DocumentRole.BUYER: RoleTheme(
        role=DocumentRole.BUYER,
        title="BUYER ORDER CONFIRMATION",
        accent="#059669",
        accent_light="#10b981",
    ),
}


@dataclass(frozen=True)
class PartyBlock:
    """A party section as it appears in the document."""

    heading: str
    party: Party


def theme_for(role: DocumentRole) -> RoleTheme:
    return THEMES[DocumentRole(role)]


def party_blocks(order: OrderDocumentRequest, role: DocumentRole) -> list[PartyBlock]:
    """Return the party sections in display order, the viewer's own party first."""
    theme = theme_for(role)
    return [
        PartyBlock(f"{theme.party_label} Information (You)", order.party_for(theme.role)),
        PartyBlock(f"{theme.counterparty_label} Information", order.counterparty_for(theme.role)),
    ]


def _rounded(value: Decimal | int | float, places: int) -> Decimal:
    number = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the kept fraction digits
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _grouped(value: Decimal | int | float, max_fraction_digits: int = 3) -> str:
    quantized = _rounded(value, max_fraction_digits)
    text = f"{quantized:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_quantity(value: Decimal | int | float) -> str:
    """Format a quantity with grouped thousands, e.g. ``1000`` -> ``1,000``."""
    return _grouped(value)


def format_amount(value: Decimal | int | float) -> str:
    """Format a monetary total with grouped thousands and default decimals."""
    return _grouped(value)


def format_unit_price(value: Decimal | int | float) -> str:
    """Format a unit price with exactly two decimals, e.g. ``4.5`` -> ``4.50``."""
    return f"{_rounded(value, 2):f}"


def format_date(value: date) -> str:
    """Short en-US date, e.g. ``3/1/2025``."""
    return f"{value.month}/{value.day}/{value.year}"


def format_timestamp(value: datetime) -> str:
    """Short en-US date and time, e.g. ``3/1/2025, 2:05:07 PM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{format_date(value)}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(enabled_extensions=("html",), default=True),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["quantity"] = format_quantity
    env.filters["amount"] = format_amount
    env.filters["unit_price"] = format_unit_price
    env.filters["short_date"] = format_date
    env.filters["timestamp"] = format_timestamp
    return env


_environment = _build_environment()


def render_order_html(
    order: OrderDocumentRequest,
    role: DocumentRole,
    generated_at: datetime | None = None,
) -> str:
    """Render the order confirmation page for one role.

    Args:
        order: Order to render
        role: Point of view of the document
        generated_at: Footer timestamp (defaults to the current local time)

    Returns:
        Complete HTML document
    """
    template = _environment.get_template(ORDER_CONFIRMATION_TEMPLATE)
    return template.render(
        order=order,
        theme=theme_for(role),
        parties=party_blocks(order, role),
        generated_at=generated_at or datetime.now(),
    )

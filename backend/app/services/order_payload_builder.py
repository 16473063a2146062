"""Builds sales-order and purchase-order requests for the order-management API."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from app.services.identity_source import CustomerIdentity
from app.services.tour_data_loader import WarehouseInfo
from app.utils.invariants import check_line_item_quantity, check_order_totals

CENTS = Decimal("0.01")
REQUIRED_SHIP_DAYS = 7
DEFAULT_FULFILLMENT_STATUS = "pending"


def money(value: Any) -> Decimal:
    """Quantize a value to two decimal places."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    return str(money(value))


@dataclass(frozen=True)
class Address:
    """Shipping or billing address block."""
    address1: str
    city: str
    state: str
    zip: str
    country: str
    address2: str = ""
    state_code: str = ""
    country_code: str = ""
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    email: str = ""

    def for_customer(self, identity: CustomerIdentity) -> "Address":
        """Copy of this address addressed to ``identity``."""
        return replace(
            self,
            first_name=identity.first_name,
            last_name=identity.last_name,
            company=identity.company,
            email=identity.email,
        )

    def to_payload(self) -> Dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company": self.company,
            "address1": self.address1,
            "address2": self.address2,
            "city": self.city,
            "state": self.state,
            "state_code": self.state_code,
            "zip": self.zip,
            "country": self.country,
            "country_code": self.country_code,
            "phone": self.phone,
            "email": self.email,
        }


class AddressResolver:
    """Resolves a warehouse's postal address, filling demo defaults for blanks."""

    DEFAULTS = {
        "address1": "123 Warehouse St",
        "address2": "",
        "city": "Demo City",
        "state": "CA",
        "zip": "90210",
        "country": "US",
        "phone": "555-0123",
    }

    def resolve(self, warehouse: WarehouseInfo) -> Address:
        raw = warehouse.address or {}

        def pick(key: str, *aliases: str) -> str:
            for candidate in (key,) + aliases:
                value = raw.get(candidate)
                if value:
                    return str(value)
            return self.DEFAULTS[key]

        state = pick("state")
        country = pick("country")
        return Address(
            first_name="Warehouse",
            last_name="Demo",
            address1=pick("address1", "address"),
            address2=pick("address2"),
            city=pick("city"),
            state=state,
            state_code=str(raw.get("state_code") or state),
            zip=pick("zip"),
            country=country,
            country_code=str(raw.get("country_code") or country),
            phone=pick("phone"),
        )


@dataclass(frozen=True)
class OrderLineItem:
    """One product line on an order."""
    product_id: str
    quantity: int
    unit_price: Decimal
    product_name: str
    warehouse_id: str
    partner_line_item_id: str = ""
    fulfillment_status: str = DEFAULT_FULFILLMENT_STATUS

    def __post_init__(self):
        check_line_item_quantity(self.product_id, self.quantity)
        object.__setattr__(self, "unit_price", money(self.unit_price))

    @property
    def subtotal(self) -> Decimal:
        return money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class SalesOrderRequest:
    """Fully-populated sales order ready for submission."""
    order_number: str
    shop_name: str
    order_date: datetime
    required_ship_date: str
    shipping_address: Address
    billing_address: Address
    line_items: Tuple[OrderLineItem, ...]
    tags: Tuple[str, ...] = ()
    fulfillment_status: str = DEFAULT_FULFILLMENT_STATUS
    subtotal: Decimal = field(init=False)
    total_price: Decimal = field(init=False)

    def __post_init__(self):
        total = sum((item.subtotal for item in self.line_items), Decimal("0"))
        object.__setattr__(self, "subtotal", money(total))
        object.__setattr__(self, "total_price", money(total))

    @property
    def customer_name(self) -> str:
        return f"{self.shipping_address.first_name} {self.shipping_address.last_name}".strip()

    def to_payload(self) -> Dict[str, Any]:
        """Render the request using the order-management API field names."""
        return {
            "order_number": self.order_number,
            "shop_name": self.shop_name,
            "fulfillment_status": self.fulfillment_status,
            "order_date": self.order_date.isoformat(),
            "total_tax": "0.00",
            "subtotal": format_money(self.subtotal),
            "total_discounts": "0.00",
            "total_price": format_money(self.total_price),
            "shipping_lines": {
                "title": "Standard Shipping",
                "price": "0.00",
                "carrier": "Demo Carrier",
                "method": "Standard",
            },
            "shipping_address": self.shipping_address.to_payload(),
            "billing_address": self.billing_address.to_payload(),
            "line_items": [
                {
                    "sku": item.product_id,
                    "quantity": item.quantity,
                    "price": format_money(item.unit_price),
                    "product_name": item.product_name,
                    "partner_line_item_id": item.partner_line_item_id,
                    "fulfillment_status": item.fulfillment_status,
                    "quantity_pending_fulfillment": item.quantity,
                    "warehouse_id": item.warehouse_id,
                }
                for item in self.line_items
            ],
            "required_ship_date": self.required_ship_date,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class PurchaseOrderRequest:
    """Fully-populated purchase order ready for submission."""
    po_number: str
    po_date: str
    vendor_id: str
    warehouse_id: str
    line_items: Tuple[OrderLineItem, ...]
    fulfillment_status: str = DEFAULT_FULFILLMENT_STATUS
    subtotal: Decimal = field(init=False)
    total_price: Decimal = field(init=False)

    def __post_init__(self):
        total = sum((item.subtotal for item in self.line_items), Decimal("0"))
        object.__setattr__(self, "subtotal", money(total))
        object.__setattr__(self, "total_price", money(total))

    @property
    def order_number(self) -> str:
        return self.po_number

    def to_payload(self) -> Dict[str, Any]:
        """Render the request using the order-management API field names."""
        return {
            "po_number": self.po_number,
            "po_date": self.po_date,
            "vendor_id": self.vendor_id,
            "warehouse_id": self.warehouse_id,
            "subtotal": format_money(self.subtotal),
            "tax": "0.00",
            "shipping_price": "0.00",
            "total_price": format_money(self.total_price),
            "fulfillment_status": self.fulfillment_status,
            "discount": "0.00",
            "line_items": [
                {
                    "sku": item.product_id,
                    "quantity": item.quantity,
                    "expected_weight_in_lbs": "1",
                    "vendor_id": self.vendor_id,
                    "quantity_received": 0,
                    "quantity_rejected": 0,
                    "price": format_money(item.unit_price),
                    "product_name": item.product_name,
                    "fulfillment_status": item.fulfillment_status,
                    "sell_ahead": 0,
                }
                for item in self.line_items
            ],
        }


class OrderPayloadBuilder:
    """
    Pure transformation from tour data to order requests.

    Totals are always recomputed from the line items; callers cannot supply
    them. Dates come from the injected clock so tests can pin them.
    """

    def __init__(
        self,
        shop_name: str = "Touring App",
        vendor_id: str = "1076735",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.shop_name = shop_name
        self.vendor_id = vendor_id
        self.clock = clock or datetime.now

    def build_sales_order(
        self,
        order_number: str,
        warehouse_address: Address,
        identity: CustomerIdentity,
        line_items: Sequence[OrderLineItem],
        tags: Sequence[str] = (),
    ) -> SalesOrderRequest:
        """
        Build a sales order shipped to ``identity`` at the warehouse address.

        Args:
            order_number: Unique order number within the run
            warehouse_address: Resolved warehouse address
            identity: Customer placed on the order
            line_items: Ordered line items (at least one)
            tags: Order tags

        Returns:
            SalesOrderRequest with recomputed totals

        Raises:
            ValueError: If no line items are given
        """
        if not line_items:
            raise ValueError(f"Sales order {order_number} needs at least one line item")
        order_date = self.clock()
        address = warehouse_address.for_customer(identity)
        request = SalesOrderRequest(
            order_number=order_number,
            shop_name=self.shop_name,
            order_date=order_date,
            required_ship_date=(order_date + timedelta(days=REQUIRED_SHIP_DAYS)).date().isoformat(),
            shipping_address=address,
            billing_address=address,
            line_items=tuple(line_items),
            tags=tuple(tags),
        )
        check_order_totals(
            (item.subtotal for item in request.line_items),
            request.subtotal,
            request.total_price,
        )
        return request

    def build_purchase_order(
        self,
        order_number: str,
        warehouse_id: str,
        line_items: Sequence[OrderLineItem],
    ) -> PurchaseOrderRequest:
        """
        Build a purchase order delivered to ``warehouse_id``.

        Raises:
            ValueError: If no line items are given
        """
        if not line_items:
            raise ValueError(f"Purchase order {order_number} needs at least one line item")
        request = PurchaseOrderRequest(
            po_number=order_number,
            po_date=self.clock().date().isoformat(),
            vendor_id=self.vendor_id,
            warehouse_id=warehouse_id,
            line_items=tuple(line_items),
        )
        check_order_totals(
            (item.subtotal for item in request.line_items),
            request.subtotal,
            request.total_price,
        )
        return request

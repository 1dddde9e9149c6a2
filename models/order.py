"""
models/order.py
---------------
Domain models for orders and their line items.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Order:
    """
    An order header.

    Attributes:
        client_id: Owning client.
        id: Database primary key (None until inserted).
        created_at: Set by the database on insert.
        client_name: Filled in by reads that join the client table.
    """
    client_id: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    client_name: Optional[str] = None


@dataclass
class LineItem:
    """An item supplied by a caller before it is attached to an order."""
    product_id: int
    quantity: int
    unit_price: float


@dataclass
class OrderItem:
    """A stored line item, keyed by (order_id, product_id)."""
    order_id: int
    product_id: int
    quantity: int
    unit_price: float

    @classmethod
    def for_order(cls, order_id: int, item: LineItem) -> "OrderItem":
        return cls(order_id, item.product_id, item.quantity, item.unit_price)


@dataclass
class ItemDetail:
    """A line item as listed, joined to its product description."""
    product_id: int
    description: str
    quantity: int
    unit_price: float

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price

    def __str__(self) -> str:
        return f"{self.product_id} {self.description}: {self.quantity} x {self.unit_price:.2f}"


@dataclass
class OrderDetail:
    """An order header together with all of its items."""
    order: Order
    items: list[ItemDetail] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.subtotal for item in self.items)


@dataclass
class ItemUpdate:
    """
    Partial update of a line item. Fields left as None are not touched.
    """
    quantity: Optional[int] = None
    unit_price: Optional[float] = None

    def assignments(self) -> list[tuple[str, object]]:
        """Return the (column, value) pairs to write, in a fixed column order."""
        pairs = [
            ("qtd_produto", self.quantity),
            ("preco_unit", self.unit_price),
        ]
        return [(column, value) for column, value in pairs if value is not None]

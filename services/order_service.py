"""
services/order_service.py
--------------------------
Order commands: parses item arguments, calls the order repositories, and
formats replies.

Item arguments use the form `product:qty:price`, e.g. `7:2:19.90`.
Update arguments use `qty=N` and/or `price=P`.
"""

from telegram.helpers import escape_markdown

from models.order import ItemUpdate, LineItem, OrderDetail
from repositories.order_item_repo import OrderItemRepository
from repositories.order_repo import OrderRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_line_item(token: str) -> LineItem:
    """
    Parse a `product:qty:price` token.

    Raises:
        ValueError: If the token is malformed.
    """
    parts = token.split(":")
    if len(parts) != 3:
        raise ValueError(f"invalid item '{token}', expected product:qty:price")
    product_id, quantity, unit_price = parts
    return LineItem(
        product_id=int(product_id),
        quantity=int(quantity),
        unit_price=float(unit_price.replace(",", ".")),
    )


def parse_item_update(tokens: list[str]) -> ItemUpdate:
    """
    Parse `qty=N` / `price=P` tokens into an ItemUpdate.

    Raises:
        ValueError: On an unknown key or a non-numeric value.
    """
    fields = ItemUpdate()
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep:
            raise ValueError(f"invalid field '{token}', expected key=value")
        key = key.lower()
        if key in ("qty", "quantity"):
            fields.quantity = int(value)
        elif key in ("price", "unit_price"):
            fields.unit_price = float(value.replace(",", "."))
        else:
            raise ValueError(f"unknown field '{key}'")
    return fields


def format_order(detail: OrderDetail) -> str:
    """Render an order and its items as a Markdown message."""
    order = detail.order
    created = order.created_at.strftime("%Y-%m-%d %H:%M") if order.created_at else "-"
    lines = [
        f"🧾 *Order #{order.id}*",
        f"👤 {escape_markdown(order.client_name or '')} (client `{order.client_id}`)",
        f"📅 {created}",
        "",
    ]
    if not detail.items:
        lines.append("No items.")
    else:
        for item in detail.items:
            lines.append(
                f"• `{item.product_id}` {escape_markdown(item.description)}: "
                f"{item.quantity} x {item.unit_price:.2f} = {item.subtotal:.2f}"
            )
        lines.append(f"\n💰 Total: {detail.total:.2f}")
    return "\n".join(lines)


class OrderService:
    """Business logic behind the order and item commands."""

    def __init__(self, orders: OrderRepository, items: OrderItemRepository):
        self.orders = orders
        self.items = items

    async def list_orders(self) -> str:
        orders = await self.orders.list()
        if orders is None:
            return "⚠️ Could not load orders, please try again later."
        if not orders:
            return "📭 No orders yet."

        lines = ["📦 *Orders*\n"]
        for o in orders:
            created = o.created_at.strftime("%Y-%m-%d") if o.created_at else "-"
            lines.append(f"• #{o.id} {escape_markdown(o.client_name or '')} ({created})")
        return "\n".join(lines)

    async def show_order(self, order_id: int) -> str:
        detail = await self.orders.get_with_items(order_id)
        if detail is None:
            return f"🔍 Order #{order_id} not found."
        return format_order(detail)

    async def create_order(self, args: list[str]) -> str:
        """
        Create an order from `<client_id> [product:qty:price ...]`.

        Raises:
            ValueError: On a missing client id or a malformed item.
        """
        if not args:
            raise ValueError("usage: /new_order <client_id> [product:qty:price ...]")
        client_id = int(args[0])
        line_items = [parse_line_item(token) for token in args[1:]]

        order_id = await self.orders.create_with_items(client_id, line_items)
        if order_id is None:
            return "❌ Order was not created. Check the client and product ids."
        return f"✅ Order #{order_id} created with {len(line_items)} item(s)."

    async def add_item(self, order_id: int, token: str) -> str:
        item = parse_line_item(token)
        if await self.orders.add_item(order_id, item):
            return f"✅ Product {item.product_id} added to order #{order_id}."
        return f"❌ Could not add product {item.product_id} to order #{order_id}."

    async def update_item(self, order_id: int, product_id: int, tokens: list[str]) -> str:
        fields = parse_item_update(tokens)
        if not fields.assignments():
            return "⚠️ Nothing to update. Use qty=N and/or price=P."
        if await self.items.update(order_id, product_id, fields):
            return f"✏️ Product {product_id} on order #{order_id} updated."
        return f"❌ Product {product_id} is not on order #{order_id}."

    async def remove_item(self, order_id: int, product_id: int) -> str:
        if await self.items.delete(order_id, product_id):
            return f"🗑️ Product {product_id} removed from order #{order_id}."
        return f"❌ Product {product_id} is not on order #{order_id}."

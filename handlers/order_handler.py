"""
handlers/order_handler.py
--------------------------
Handles order and line-item commands. Delegates all logic to OrderService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.order_service import OrderService
from utils.logger import get_logger

logger = get_logger(__name__)


def _service(context: ContextTypes.DEFAULT_TYPE) -> OrderService:
    return context.bot_data["order_service"]


def _int_args(args: list[str], count: int) -> list[int]:
    """
    Parse the first `count` arguments as integers.

    Raises:
        ValueError: If there are too few arguments or one is not a number.
    """
    if len(args) < count:
        raise ValueError(f"expected {count} numeric argument(s)")
    return [int(a) for a in args[:count]]


async def orders_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /orders command - list all orders, newest first."""
    msg = await _service(context).list_orders()
    await update.message.reply_text(msg, parse_mode="Markdown")


async def order_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /order <id> command - show one order with its items.
    Usage: /order 12
    """
    try:
        (order_id,) = _int_args(context.args or [], 1)
    except ValueError:
        await update.message.reply_text("⚠️ Usage: /order <order id>\nExample: /order 12")
        return

    msg = await _service(context).show_order(order_id)
    await update.message.reply_text(msg, parse_mode="Markdown")


async def new_order_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /new_order <client_id> [product:qty:price ...] command.
    Usage: /new_order 3 7:2:19.90 9:1:5
    """
    try:
        msg = await _service(context).create_order(context.args or [])
    except ValueError as e:
        logger.info(f"Rejected /new_order arguments {context.args}: {e}")
        await update.message.reply_text(
            "⚠️ Usage: /new_order <client_id> [product:qty:price ...]\n"
            "Example: /new_order 3 7:2:19.90 9:1:5"
        )
        return
    await update.message.reply_text(msg)


async def add_item_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_item <order_id> <product:qty:price> command.
    Usage: /add_item 12 7:2:19.90
    """
    args = context.args or []
    try:
        (order_id,) = _int_args(args, 1)
        if len(args) < 2:
            raise ValueError("missing item")
        msg = await _service(context).add_item(order_id, args[1])
    except ValueError:
        await update.message.reply_text(
            "⚠️ Usage: /add_item <order_id> <product:qty:price>\nExample: /add_item 12 7:2:19.90"
        )
        return
    await update.message.reply_text(msg)


async def update_item_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /update_item <order_id> <product_id> [qty=N] [price=P] command.
    Usage: /update_item 12 7 qty=5
    """
    args = context.args or []
    try:
        order_id, product_id = _int_args(args, 2)
        msg = await _service(context).update_item(order_id, product_id, args[2:])
    except ValueError:
        await update.message.reply_text(
            "⚠️ Usage: /update_item <order_id> <product_id> [qty=N] [price=P]\n"
            "Example: /update_item 12 7 qty=5 price=18.50"
        )
        return
    await update.message.reply_text(msg)


async def remove_item_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /remove_item <order_id> <product_id> command.
    Usage: /remove_item 12 7
    """
    try:
        order_id, product_id = _int_args(context.args or [], 2)
    except ValueError:
        await update.message.reply_text("⚠️ Usage: /remove_item <order_id> <product_id>")
        return

    msg = await _service(context).remove_item(order_id, product_id)
    await update.message.reply_text(msg)

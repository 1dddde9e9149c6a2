"""
main.py
-------
Entry point for the OrderDesk Telegram bot.

Responsibilities:
    - Ping the database; refuse to start if it is unreachable.
    - Initialize the schema and wire repositories and services.
    - Configure and start the Telegram bot with all handlers.
"""

import sys

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN, TELEGRAM_BOT_TOKEN
from db.connection import Database
from db.init_db import create_tables
from handlers.client_handler import add_client_command, clients_command
from handlers.order_handler import (
    add_item_command,
    new_order_command,
    order_command,
    orders_command,
    remove_item_command,
    update_item_command,
)
from handlers.start_handler import help_command, start_command
from repositories.client_repo import ClientRepository
from repositories.order_item_repo import OrderItemRepository
from repositories.order_repo import OrderRepository
from services.client_service import ClientService
from services.order_service import OrderService
from utils.logger import get_logger

logger = get_logger(__name__)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("help", "📖 Show help"),
        BotCommand("clients", "👥 List clients"),
        BotCommand("add_client", "➕ Register a client"),
        BotCommand("orders", "📦 List orders"),
        BotCommand("order", "🧾 Show an order"),
        BotCommand("new_order", "🛒 Create an order"),
        BotCommand("add_item", "➕ Add an item to an order"),
        BotCommand("update_item", "✏️ Change an item"),
        BotCommand("remove_item", "🗑️ Remove an item"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_application(db: Database) -> Application:
    """Build the Telegram application with services wired to `db`."""
    items = OrderItemRepository(db)
    orders = OrderRepository(db, items)

    async def close_database(application: Application) -> None:
        db.close()

    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(set_bot_commands)
        .post_shutdown(close_database)
        .build()
    )
    app.bot_data["client_service"] = ClientService(ClientRepository(db))
    app.bot_data["order_service"] = OrderService(orders, items)

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("clients", clients_command))
    app.add_handler(CommandHandler("add_client", add_client_command))
    app.add_handler(CommandHandler("orders", orders_command))
    app.add_handler(CommandHandler("order", order_command))
    app.add_handler(CommandHandler("new_order", new_order_command))
    app.add_handler(CommandHandler("add_item", add_item_command))
    app.add_handler(CommandHandler("update_item", update_item_command))
    app.add_handler(CommandHandler("remove_item", remove_item_command))
    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Checking database connectivity...")
    db = Database(DATABASE_URL, min_conn=DB_POOL_MIN, max_conn=DB_POOL_MAX)
    if not db.ping():
        logger.error("Could not connect to the database; not starting.")
        sys.exit(1)
    create_tables(db)

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application(db)

    # ── 3. Start polling ──────────────────────────────────
    logger.info("🚀 OrderDesk is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    logger.info("OrderDesk stopped.")


if __name__ == "__main__":
    main()

"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🛒 *OrderDesk*

*👥 Clients:*
/clients - list clients
/add\\_client <cpf> <name> - register a client

*📦 Orders:*
/orders - list orders, newest first
/order <id> - show an order and its items
/new\\_order <client\\_id> [product:qty:price ...] - create an order
Example: `/new_order 3 7:2:19.90 9:1:5`

*🧾 Items:*
/add\\_item <order\\_id> <product:qty:price>
/update\\_item <order\\_id> <product\\_id> [qty=N] [price=P]
/remove\\_item <order\\_id> <product\\_id>
"""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"Type /help to see the available commands.",
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")

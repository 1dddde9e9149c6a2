"""
handlers/client_handler.py
---------------------------
Handles client commands. Delegates all logic to ClientService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.client_service import ClientService
from utils.logger import get_logger

logger = get_logger(__name__)


def _service(context: ContextTypes.DEFAULT_TYPE) -> ClientService:
    return context.bot_data["client_service"]


async def clients_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clients command - list all clients."""
    msg = await _service(context).list_clients()
    await update.message.reply_text(msg, parse_mode="Markdown")


async def add_client_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_client <cpf> <name> command.
    Usage: /add_client 12345678900 Maria Silva
    """
    try:
        msg = await _service(context).add_client(context.args or [])
    except ValueError as e:
        logger.info(f"Rejected /add_client arguments {context.args}: {e}")
        await update.message.reply_text(
            "⚠️ Usage: /add_client <cpf> <name>\nExample: /add_client 12345678900 Maria Silva"
        )
        return
    await update.message.reply_text(msg, parse_mode="Markdown")

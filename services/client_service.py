"""
services/client_service.py
---------------------------
Client commands: builds client records from command arguments and formats
replies.
"""

from telegram.helpers import escape_markdown

from models.client import Client
from repositories.client_repo import ClientRepository


class ClientService:
    """Business logic behind /clients and /add_client."""

    def __init__(self, repo: ClientRepository):
        self.repo = repo

    async def list_clients(self) -> str:
        clients = await self.repo.list()
        if clients is None:
            return "⚠️ Could not load clients, please try again later."
        if not clients:
            return "📭 No clients registered yet."

        lines = ["👥 *Clients*\n"]
        lines.extend(f"• `{c.id}` {escape_markdown(c.name)} ({escape_markdown(c.cpf)})" for c in clients)
        return "\n".join(lines)

    async def add_client(self, args: list[str]) -> str:
        """
        Register a client from `/add_client <cpf> <name...>` arguments.

        Raises:
            ValueError: If the cpf or the name is missing.
        """
        if len(args) < 2:
            raise ValueError("usage: /add_client <cpf> <name>")

        client = Client(cpf=args[0], name=" ".join(args[1:]))
        if await self.repo.create(client):
            return f"✅ Client `{client.id}` registered: {escape_markdown(client.name)}"
        return f"❌ Could not register client {escape_markdown(client.cpf)} (is the cpf already in use?)"

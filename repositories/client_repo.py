"""
repositories/client_repo.py
----------------------------
Data access layer for clients.
All SQL queries related to the `cliente` table live here.
"""

from typing import Optional

import psycopg2

from db.connection import Database
from models.client import Client
from utils.logger import get_logger

logger = get_logger(__name__)


class ClientRepository:
    """Repository for the cliente table."""

    def __init__(self, db: Database):
        self.db = db

    # ── READ ──────────────────────────────────────────────

    async def list(self) -> Optional[list[Client]]:
        """
        Fetch every client, in whatever order the database returns them.

        Returns:
            A list of Client objects ([] if there are none), or None if the
            query failed.
        """
        sql = "SELECT id_cliente, cpf, nome FROM cliente;"
        try:
            rows = await self.db.query(sql)
        except psycopg2.Error as e:
            logger.error(f"Failed to list clients: {e}")
            return None
        return [self._row_to_client(r) for r in rows]

    # ── CREATE ────────────────────────────────────────────

    async def create(self, client: Client) -> bool:
        """
        Insert a new client. The name is stored upper-cased.

        Args:
            client: The Client to persist; its `id` is set on success.

        Returns:
            True if exactly one row was inserted, False otherwise
            (including a duplicate cpf).
        """
        sql = """
            INSERT INTO cliente (cpf, nome)
            VALUES (%s, %s)
            RETURNING id_cliente;
        """
        client.name = client.name.upper()
        try:
            rows = await self.db.query(sql, (client.cpf, client.name))
        except psycopg2.Error as e:
            logger.error(f"Failed to create client {client.cpf}: {e}")
            return False

        if len(rows) != 1:
            return False
        client.id = rows[0]["id_cliente"]
        logger.info(f"Created client #{client.id} ({client.cpf})")
        return True

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_client(row: dict) -> Client:
        """Convert a database row to a Client domain object."""
        return Client(id=row["id_cliente"], cpf=row["cpf"], name=row["nome"])

"""
repositories/order_repo.py
---------------------------
Data access layer for orders.

Orders are created together with their items in a single transaction on a
dedicated connection: either the header and every item are committed, or the
whole order is rolled back.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional, Sequence

import psycopg2

from db.connection import Database
from models.order import ItemDetail, LineItem, Order, OrderDetail, OrderItem
from repositories.order_item_repo import (
    INSERT_ITEM_SQL,
    SELECT_ITEMS_BY_ORDER_SQL,
    OrderItemRepository,
    row_to_item_detail,
)
from utils.logger import get_logger

logger = get_logger(__name__)

INSERT_ORDER_SQL = """
    INSERT INTO venda (id_cliente)
    VALUES (%s)
    RETURNING id_venda;
"""

_SELECT_ORDERS = """
    SELECT v.id_venda, v.id_cliente, v.data_venda, c.nome
      FROM venda v
      JOIN cliente c ON c.id_cliente = v.id_cliente
"""


class OrderCreationError(Exception):
    """Order creation cannot proceed: no order id came back, or a step ran out of order."""


class TransactionState(Enum):
    STARTED = "started"
    HEADER_INSERTED = "header_inserted"
    ITEM_INSERTED = "item_inserted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


_ALLOWED_TRANSITIONS = {
    TransactionState.STARTED: {TransactionState.HEADER_INSERTED, TransactionState.ROLLED_BACK},
    TransactionState.HEADER_INSERTED: {
        TransactionState.ITEM_INSERTED, TransactionState.COMMITTED, TransactionState.ROLLED_BACK,
    },
    TransactionState.ITEM_INSERTED: {
        TransactionState.ITEM_INSERTED, TransactionState.COMMITTED, TransactionState.ROLLED_BACK,
    },
    TransactionState.COMMITTED: set(),
    TransactionState.ROLLED_BACK: set(),
}


class OrderRepository:
    """Repository for the venda table and order-level item operations."""

    def __init__(self, db: Database, items: Optional[OrderItemRepository] = None):
        self.db = db
        self.items = items or OrderItemRepository(db)

    # ── CREATE ────────────────────────────────────────────

    async def create_with_items(self, client_id: int, items: Sequence[LineItem]) -> Optional[int]:
        """
        Create an order and all of its items atomically.

        Args:
            client_id: Owning client.
            items: Items to insert, in order. May be empty.

        Returns:
            The new order id, or None if anything failed and the order was
            rolled back.
        """
        return await self.db.run(self._create_with_items, client_id, list(items))

    def _create_with_items(self, client_id: int, items: list[LineItem]) -> Optional[int]:
        try:
            conn = self.db.get_connection()
        except (psycopg2.Error, RuntimeError) as e:
            logger.error(f"Failed to create order for client {client_id}: no connection: {e}")
            return None

        state = TransactionState.STARTED
        try:
            with conn.cursor() as cur:
                cur.execute(INSERT_ORDER_SQL, (client_id,))
                row = cur.fetchone()
                if row is None:
                    raise OrderCreationError(f"no order id returned for client {client_id}")
                order_id = row[0]
                state = self._advance(state, TransactionState.HEADER_INSERTED, client_id)

                for item in items:
                    cur.execute(INSERT_ITEM_SQL, (
                        order_id, item.product_id, item.quantity, item.unit_price,
                    ))
                    state = self._advance(state, TransactionState.ITEM_INSERTED, client_id)

            conn.commit()
            self._advance(state, TransactionState.COMMITTED, client_id)
            logger.info(f"Created order #{order_id} for client {client_id} with {len(items)} item(s)")
            return order_id
        except (psycopg2.Error, OrderCreationError) as e:
            conn.rollback()
            self._advance(state, TransactionState.ROLLED_BACK, client_id)
            logger.error(
                f"Failed to create order for client {client_id} "
                f"(rolled back after {state.value}): {e}"
            )
            return None
        finally:
            self.db.release_connection(conn)

    @staticmethod
    def _advance(current: TransactionState, new: TransactionState, client_id: int) -> TransactionState:
        """
        Move the creation workflow to `new`.

        Raises:
            OrderCreationError: If `new` cannot follow `current`.
        """
        if new not in _ALLOWED_TRANSITIONS[current]:
            raise OrderCreationError(f"illegal transition {current.value} -> {new.value}")
        logger.debug(f"Order for client {client_id}: {current.value} -> {new.value}")
        return new

    # ── READ ──────────────────────────────────────────────

    async def list(self) -> Optional[list[Order]]:
        """
        Fetch every order with its client's name, newest first.

        Returns:
            A list of Order objects, or None if the query failed.
        """
        sql = _SELECT_ORDERS + " ORDER BY v.id_venda DESC;"
        try:
            rows = await self.db.query(sql)
        except psycopg2.Error as e:
            logger.error(f"Failed to list orders: {e}")
            return None
        return [self._row_to_order(r) for r in rows]

    async def get_with_items(self, order_id: int) -> Optional[OrderDetail]:
        """
        Fetch an order header and its items. Both queries run concurrently.

        Returns:
            The OrderDetail, or None if the order does not exist or a query
            failed.
        """
        sql = _SELECT_ORDERS + " WHERE v.id_venda = %s;"
        try:
            header_rows, item_rows = await asyncio.gather(
                self.db.query(sql, (order_id,)),
                self.db.query(SELECT_ITEMS_BY_ORDER_SQL, (order_id,)),
            )
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch order #{order_id}: {e}")
            return None

        if not header_rows:
            return None
        return OrderDetail(
            order=self._row_to_order(header_rows[0]),
            items=[row_to_item_detail(r) for r in item_rows],
        )

    async def list_items(self, order_id: int) -> Optional[list[ItemDetail]]:
        """Items of an order; see OrderItemRepository.list_by_order."""
        return await self.items.list_by_order(order_id)

    # ── ITEMS ─────────────────────────────────────────────

    async def add_item(self, order_id: int, item: LineItem) -> bool:
        """Add one item to an existing order, outside of any creation transaction."""
        return await self.items.create(OrderItem.for_order(order_id, item))

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_order(row: dict) -> Order:
        """Convert a joined venda/cliente row to an Order domain object."""
        return Order(
            id=row["id_venda"],
            client_id=row["id_cliente"],
            created_at=row["data_venda"],
            client_name=row["nome"],
        )

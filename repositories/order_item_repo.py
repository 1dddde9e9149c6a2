"""
repositories/order_item_repo.py
--------------------------------
Data access layer for order line items.
All SQL queries related to the `item_venda` table live here.
"""

from typing import Optional

import psycopg2
from psycopg2 import sql

from db.connection import Database
from models.order import ItemDetail, ItemUpdate, OrderItem
from utils.logger import get_logger

logger = get_logger(__name__)

INSERT_ITEM_SQL = """
    INSERT INTO item_venda (id_venda, id_produto, qtd_produto, preco_unit)
    VALUES (%s, %s, %s, %s)
    RETURNING id_venda, id_produto;
"""

SELECT_ITEMS_BY_ORDER_SQL = """
    SELECT iv.id_produto, p.descricao, iv.qtd_produto, iv.preco_unit
      FROM item_venda iv
      JOIN produto p ON p.id_produto = iv.id_produto
     WHERE iv.id_venda = %s
     ORDER BY iv.id_produto;
"""


def row_to_item_detail(row: dict) -> ItemDetail:
    """Convert a row of SELECT_ITEMS_BY_ORDER_SQL to an ItemDetail."""
    return ItemDetail(
        product_id=row["id_produto"],
        description=row["descricao"],
        quantity=row["qtd_produto"],
        unit_price=float(row["preco_unit"]),
    )


def build_update(fields: ItemUpdate, order_id: int, product_id: int) -> tuple[sql.Composed, list]:
    """
    Build the UPDATE statement for the supplied fields.

    Returns:
        The composed statement and its parameters, SET values first and the
        composite key last.
    """
    assignments = fields.assignments()
    set_clause = sql.SQL(", ").join(
        sql.SQL("{} = %s").format(sql.Identifier(column)) for column, _ in assignments
    )
    statement = sql.SQL(
        "UPDATE item_venda SET {} "
        "WHERE id_venda = %s AND id_produto = %s "
        "RETURNING id_venda, id_produto;"
    ).format(set_clause)
    params = [value for _, value in assignments] + [order_id, product_id]
    return statement, params


class OrderItemRepository:
    """Repository for the item_venda table."""

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    async def create(self, item: OrderItem) -> bool:
        """
        Insert a line item.

        Returns:
            True if the row was inserted. A missing order/product or a product
            already on the order is logged and returns False.
        """
        params = (item.order_id, item.product_id, item.quantity, item.unit_price)
        try:
            rows = await self.db.query(INSERT_ITEM_SQL, params)
        except psycopg2.Error as e:
            logger.error(f"Failed to add product {item.product_id} to order #{item.order_id}: {e}")
            return False

        if rows:
            logger.info(f"Added product {item.product_id} to order #{item.order_id}")
            return True
        return False

    # ── READ ──────────────────────────────────────────────

    async def list_by_order(self, order_id: int) -> Optional[list[ItemDetail]]:
        """
        List the items of an order with their product descriptions,
        ordered by product id.

        Returns:
            A list ([] if the order has no items), or None if the query failed.
        """
        try:
            rows = await self.db.query(SELECT_ITEMS_BY_ORDER_SQL, (order_id,))
        except psycopg2.Error as e:
            logger.error(f"Failed to list items of order #{order_id}: {e}")
            return None
        return [row_to_item_detail(r) for r in rows]

    # ── UPDATE ────────────────────────────────────────────

    async def update(self, order_id: int, product_id: int, fields: ItemUpdate) -> bool:
        """
        Rewrite the quantity and/or unit price of one line item.

        Args:
            order_id: Order the item belongs to.
            product_id: Product of the item.
            fields: Only the non-None fields are written.

        Returns:
            True if exactly one row was updated. False when no field was
            supplied (nothing is sent to the database), when the item does not
            exist, or on a storage error.
        """
        if not fields.assignments():
            logger.warning(f"No fields to update for product {product_id} on order #{order_id}")
            return False

        statement, params = build_update(fields, order_id, product_id)
        try:
            rows = await self.db.query(statement, params)
        except psycopg2.Error as e:
            logger.error(f"Failed to update product {product_id} on order #{order_id}: {e}")
            return False

        if len(rows) == 1:
            logger.info(f"Updated product {product_id} on order #{order_id}")
            return True
        return False

    # ── DELETE ────────────────────────────────────────────

    async def delete(self, order_id: int, product_id: int) -> bool:
        """
        Remove a line item.

        Returns:
            True if a row was removed, False if there was nothing to remove or
            the delete failed.
        """
        sql_text = """
            DELETE FROM item_venda
             WHERE id_venda = %s AND id_produto = %s
             RETURNING id_venda, id_produto;
        """
        try:
            rows = await self.db.query(sql_text, (order_id, product_id))
        except psycopg2.Error as e:
            logger.error(f"Failed to remove product {product_id} from order #{order_id}: {e}")
            return False

        if rows:
            logger.info(f"Removed product {product_id} from order #{order_id}")
            return True
        return False

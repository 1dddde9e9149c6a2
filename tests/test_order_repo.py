"""
Tests for OrderRepository: the order-with-items transaction and the order reads.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import psycopg2
import pytest
from psycopg2 import pool

from models.order import ItemDetail, LineItem
from repositories.order_repo import OrderCreationError, OrderRepository, TransactionState

ITEMS = [LineItem(product_id=7, quantity=2, unit_price=19.9), LineItem(product_id=9, quantity=1, unit_price=5.0)]


def test_create_with_items_commits_header_and_items(db, conn, cursor) -> None:
    cursor.fetchone.return_value = (42,)

    order_id = asyncio.run(OrderRepository(db).create_with_items(3, ITEMS))

    assert order_id == 42
    assert cursor.execute.call_count == 3
    assert cursor.execute.call_args_list[0].args[1] == (3,)
    assert cursor.execute.call_args_list[1].args[1] == (42, 7, 2, 19.9)
    assert cursor.execute.call_args_list[2].args[1] == (42, 9, 1, 5.0)
    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()
    db.release_connection.assert_called_once_with(conn)


def test_create_with_no_items_creates_empty_order(db, conn, cursor) -> None:
    cursor.fetchone.return_value = (5,)

    assert asyncio.run(OrderRepository(db).create_with_items(3, [])) == 5
    assert cursor.execute.call_count == 1
    conn.commit.assert_called_once()


def test_failing_item_rolls_back_whole_order(db, conn, cursor) -> None:
    cursor.fetchone.return_value = (42,)
    cursor.execute.side_effect = [None, None, psycopg2.IntegrityError("violates foreign key constraint")]

    order_id = asyncio.run(OrderRepository(db).create_with_items(3, ITEMS))

    assert order_id is None
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    db.release_connection.assert_called_once_with(conn)


def test_missing_header_row_rolls_back(db, conn, cursor) -> None:
    cursor.fetchone.return_value = None

    assert asyncio.run(OrderRepository(db).create_with_items(3, ITEMS)) is None
    assert cursor.execute.call_count == 1
    conn.rollback.assert_called_once()
    db.release_connection.assert_called_once_with(conn)


def test_no_connection_available_returns_none(db) -> None:
    db.get_connection.side_effect = pool.PoolError("connection pool exhausted")

    assert asyncio.run(OrderRepository(db).create_with_items(3, ITEMS)) is None
    db.release_connection.assert_not_called()


def test_create_with_items_runs_in_worker(db, cursor) -> None:
    cursor.fetchone.return_value = (1,)
    repo = OrderRepository(db)

    asyncio.run(repo.create_with_items(3, iter(ITEMS)))

    func, client_id, items = db.run.call_args.args
    assert func == repo._create_with_items
    assert client_id == 3
    assert items == ITEMS


def _order_row(order_id: int) -> dict:
    return {
        "id_venda": order_id,
        "id_cliente": 3,
        "data_venda": datetime(2024, 5, 1, 10, 30),
        "nome": "ANA",
    }


def test_list_orders(db) -> None:
    db.query.return_value = [_order_row(2), _order_row(1)]

    orders = asyncio.run(OrderRepository(db).list())

    assert [o.id for o in orders] == [2, 1]
    assert orders[0].client_name == "ANA"
    assert "DESC" in db.query.call_args.args[0]


def test_list_orders_failure_returns_none(db) -> None:
    db.query.side_effect = psycopg2.OperationalError("down")

    assert asyncio.run(OrderRepository(db).list()) is None


def _scripted(header: list, items: list):
    def query(sql, params=None):
        return items if "produto" in sql else header
    return query


def test_get_with_items_issues_both_queries(db) -> None:
    db.query.side_effect = _scripted(
        [_order_row(4)],
        [{"id_produto": 7, "descricao": "Caneta", "qtd_produto": 2, "preco_unit": 1.5}],
    )

    detail = asyncio.run(OrderRepository(db).get_with_items(4))

    assert db.query.call_count == 2
    assert detail.order.id == 4
    assert detail.items == [ItemDetail(7, "Caneta", 2, 1.5)]
    assert detail.total == 3.0


def test_get_with_items_missing_header_returns_none(db) -> None:
    db.query.side_effect = _scripted(
        [],
        [{"id_produto": 7, "descricao": "Caneta", "qtd_produto": 2, "preco_unit": 1.5}],
    )

    assert asyncio.run(OrderRepository(db).get_with_items(4)) is None


def test_get_with_items_failure_returns_none(db) -> None:
    db.query.side_effect = psycopg2.OperationalError("down")

    assert asyncio.run(OrderRepository(db).get_with_items(4)) is None


def test_add_item_inserts_single_row(db) -> None:
    db.query.return_value = [{"id_venda": 4, "id_produto": 7}]

    ok = asyncio.run(OrderRepository(db).add_item(4, LineItem(7, 1, 2.0)))

    assert ok is True
    assert db.query.call_args.args[1] == (4, 7, 1, 2.0)
    db.run.assert_not_called()


def test_unopened_pool_returns_none(db) -> None:
    db.get_connection.side_effect = RuntimeError("Database pool not initialized. Call open() first.")

    assert asyncio.run(OrderRepository(db).create_with_items(3, ITEMS)) is None
    db.release_connection.assert_not_called()


def test_list_items_delegates_to_item_repository(db) -> None:
    items = MagicMock()
    items.list_by_order = AsyncMock(return_value=[ItemDetail(7, "Caneta", 2, 1.5)])

    listed = asyncio.run(OrderRepository(db, items).list_items(4))

    assert listed == [ItemDetail(7, "Caneta", 2, 1.5)]
    items.list_by_order.assert_awaited_once_with(4)


def test_transition_rules() -> None:
    advance = OrderRepository._advance
    S = TransactionState

    assert advance(S.STARTED, S.HEADER_INSERTED, 3) is S.HEADER_INSERTED
    assert advance(S.HEADER_INSERTED, S.ITEM_INSERTED, 3) is S.ITEM_INSERTED
    assert advance(S.ITEM_INSERTED, S.ITEM_INSERTED, 3) is S.ITEM_INSERTED
    assert advance(S.HEADER_INSERTED, S.COMMITTED, 3) is S.COMMITTED
    assert advance(S.STARTED, S.ROLLED_BACK, 3) is S.ROLLED_BACK
    assert advance(S.ITEM_INSERTED, S.ROLLED_BACK, 3) is S.ROLLED_BACK
    with pytest.raises(OrderCreationError):
        advance(S.COMMITTED, S.ITEM_INSERTED, 3)
    with pytest.raises(OrderCreationError):
        advance(S.STARTED, S.COMMITTED, 3)
    with pytest.raises(OrderCreationError):
        advance(S.ROLLED_BACK, S.HEADER_INSERTED, 3)

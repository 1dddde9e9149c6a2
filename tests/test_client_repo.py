"""
Tests for ClientRepository: listing and creation against a mocked Database.
"""

import asyncio

import psycopg2

from models.client import Client
from repositories.client_repo import ClientRepository


def test_list_maps_rows(db) -> None:
    db.query.return_value = [
        {"id_cliente": 1, "cpf": "111", "nome": "ANA"},
        {"id_cliente": 2, "cpf": "222", "nome": "BRUNO"},
    ]

    clients = asyncio.run(ClientRepository(db).list())

    assert clients == [Client(cpf="111", name="ANA", id=1), Client(cpf="222", name="BRUNO", id=2)]


def test_list_empty_is_not_a_failure(db) -> None:
    assert asyncio.run(ClientRepository(db).list()) == []


def test_list_failure_returns_none(db) -> None:
    db.query.side_effect = psycopg2.OperationalError("server closed the connection")

    assert asyncio.run(ClientRepository(db).list()) is None


def test_create_uppercases_name_and_sets_id(db) -> None:
    db.query.return_value = [{"id_cliente": 9}]
    client = Client(cpf="12345678900", name="Maria Silva")

    assert asyncio.run(ClientRepository(db).create(client)) is True

    assert client.id == 9
    assert client.name == "MARIA SILVA"
    args = db.query.call_args.args
    assert args[1] == ("12345678900", "MARIA SILVA")


def test_create_duplicate_cpf_returns_false(db) -> None:
    db.query.side_effect = psycopg2.IntegrityError("duplicate key value violates unique constraint")
    client = Client(cpf="12345678900", name="maria")

    assert asyncio.run(ClientRepository(db).create(client)) is False
    assert client.id is None


def test_create_without_returned_row_returns_false(db) -> None:
    assert asyncio.run(ClientRepository(db).create(Client(cpf="1", name="x"))) is False

"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Clients: cpf is the business key
CREATE TABLE IF NOT EXISTS cliente (
    id_cliente      SERIAL PRIMARY KEY,
    cpf             VARCHAR(14) UNIQUE NOT NULL,
    nome            VARCHAR(150) NOT NULL
);

-- Products are referenced by line items, not managed here
CREATE TABLE IF NOT EXISTS produto (
    id_produto      SERIAL PRIMARY KEY,
    descricao       VARCHAR(255) NOT NULL
);

-- Order headers
CREATE TABLE IF NOT EXISTS venda (
    id_venda        SERIAL PRIMARY KEY,
    id_cliente      INT NOT NULL REFERENCES cliente(id_cliente),
    data_venda      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Line items: one row per product per order
CREATE TABLE IF NOT EXISTS item_venda (
    id_venda        INT NOT NULL REFERENCES venda(id_venda) ON DELETE CASCADE,
    id_produto      INT NOT NULL REFERENCES produto(id_produto),
    qtd_produto     INT NOT NULL,
    preco_unit      NUMERIC(12,2) NOT NULL,
    PRIMARY KEY (id_venda, id_produto)
);

CREATE INDEX IF NOT EXISTS idx_venda_cliente ON venda(id_cliente);
"""


def create_tables(db: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = db.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        db.release_connection(conn)


if __name__ == "__main__":
    from config import DATABASE_URL

    database = Database(DATABASE_URL)
    database.open()
    try:
        create_tables(database)
    finally:
        database.close()
    print("Database schema created successfully.")

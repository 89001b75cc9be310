"""
Reads table, column and trigger metadata from a MySQL server's
information_schema.
"""

import contextlib
import logging
import typing as t

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import CatalogQueryError
from .schema import ExistingTrigger, SourceColumn, SourceTable

logger = logging.getLogger(__name__)

TABLES_SQL = text(
    """
    SELECT TABLE_NAME
    FROM information_schema.TABLES
    WHERE TABLE_SCHEMA = :db
    AND TABLE_TYPE = 'BASE TABLE'
    ORDER BY TABLE_NAME
    """
)

COLUMNS_SQL = text(
    """
    SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_KEY, COLUMN_COMMENT
    FROM information_schema.COLUMNS
    WHERE TABLE_SCHEMA = :db
    AND TABLE_NAME = :table
    ORDER BY ORDINAL_POSITION
    """
)

TRIGGERS_SQL = text(
    """
    SELECT TRIGGER_NAME, EVENT_MANIPULATION, ACTION_STATEMENT
    FROM information_schema.TRIGGERS
    WHERE TRIGGER_SCHEMA = :db
    AND EVENT_OBJECT_TABLE = :table
    AND ACTION_TIMING = 'AFTER'
    ORDER BY ACTION_ORDER
    """
)


def create_mysql_engine(
    host: str, user: str, password: str, db: str, port: int = 3306
) -> Engine:
    url = URL.create(
        "mysql+pymysql",
        username=user,
        password=password or None,
        host=host,
        port=port,
        database=db,
    )
    return create_engine(url)


@contextlib.contextmanager
def connect(engine: Engine) -> t.Iterator[Connection]:
    """Opens a connection, reporting an unreachable server as CatalogQueryError."""
    try:
        conn = engine.connect()
    except SQLAlchemyError as exc:
        raise CatalogQueryError(f"Cannot connect to mysql: {exc}") from exc
    with conn:
        yield conn


class MysqlCatalog:
    """
    Schema catalog over an open SQLAlchemy connection. Every driver error is
    re-raised as CatalogQueryError.
    """

    def __init__(self, conn: Connection, db: str) -> None:
        self.conn = conn
        self.db = db

    def _fetch(self, statement: t.Any, **params: str) -> t.List[t.Mapping[str, t.Any]]:
        try:
            result = self.conn.execute(statement, {"db": self.db, **params})
            return list(result.mappings())
        except SQLAlchemyError as exc:
            raise CatalogQueryError(f"catalog query failed: {exc}") from exc

    def list_tables(self) -> t.List[str]:
        return [row["TABLE_NAME"] for row in self._fetch(TABLES_SQL)]

    def get_table(self, name: str) -> SourceTable:
        columns = [SourceColumn.from_row(row) for row in self._fetch(COLUMNS_SQL, table=name)]
        if not columns:
            raise CatalogQueryError(f"no columns found for table {self.db}.{name}")
        triggers = [
            ExistingTrigger.from_row(row) for row in self._fetch(TRIGGERS_SQL, table=name)
        ]
        logger.debug(
            "Read %d columns and %d triggers for %s", len(columns), len(triggers), name
        )
        return SourceTable(name=name, columns=columns, triggers=triggers)


class Catalog(t.Protocol):
    def list_tables(self) -> t.List[str]:
        ...

    def get_table(self, name: str) -> SourceTable:
        ...

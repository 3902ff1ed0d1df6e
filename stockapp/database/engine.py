import logging
import sqlite3

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from stockapp.database.base import Base

logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url) -> bool:
    if url.database in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    is_sqlite_memory = is_sqlite and _is_sqlite_memory(url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)

    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_sqlite_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    return engine


def ensure_schema(engine: Engine) -> list[tuple[str, str]]:
    """Create missing tables, then add columns the models define but the tables lack.

    Forward-only: existing columns are never dropped, renamed or retyped.
    Returns the ``(table, column)`` pairs that were added.
    """
    import stockapp.models  # noqa: F401  registers mappers on Base.metadata

    Base.metadata.create_all(bind=engine)

    preparer = engine.dialect.identifier_preparer
    added_columns = []
    with engine.connect() as conn:
        with conn.begin():
            inspector = inspect(conn)
            for table in Base.metadata.sorted_tables:
                existing = {column["name"] for column in inspector.get_columns(table.name)}
                for column in table.columns:
                    if column.name in existing:
                        continue
                    ddl = column.type.compile(dialect=engine.dialect)
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(
                        "ALTER TABLE {} ADD COLUMN {} {}".format(
                            preparer.format_table(table),
                            preparer.format_column(column),
                            ddl,
                        )
                    )
                    added_columns.append((table.name, column.name))

    for table_name, column_name in added_columns:
        logger.info(
            "Added missing column %s.%s",
            table_name,
            column_name,
            extra={"table": table_name, "column": column_name},
        )
    return added_columns

"""SQLite transcript store.

This module persists networks, buffers, senders, and log rows in the
four-table schema and exposes explicit batch transactions to the driver.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from types import TracebackType
from typing import Any, Callable, Sequence

from core.constants import BUFFER_TABLE, LOG_TABLE, NETWORK_TABLE, SENDER_TABLE
from core.errors import IrclogStorageError
from core.logging_config import get_logger
from core.types import Buffer, EntityKind, Message, MessageType, Network, Sender
from store.protocols import DimensionEntity, StoredEntity

_LOGGER = get_logger(__name__)

_SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {SENDER_TABLE} (
    id INTEGER NOT NULL,
    nick VARCHAR,
    user VARCHAR,
    host VARCHAR,
    PRIMARY KEY (id)
);
CREATE TABLE IF NOT EXISTS {NETWORK_TABLE} (
    id INTEGER NOT NULL,
    name VARCHAR,
    PRIMARY KEY (id)
);
CREATE TABLE IF NOT EXISTS {BUFFER_TABLE} (
    id INTEGER NOT NULL,
    networkid INTEGER NOT NULL,
    name VARCHAR,
    PRIMARY KEY (id),
    FOREIGN KEY(networkid) REFERENCES {NETWORK_TABLE} (id)
);
CREATE TABLE IF NOT EXISTS {LOG_TABLE} (
    id INTEGER NOT NULL,
    type INTEGER NOT NULL,
    timestamp INTEGER NOT NULL,
    bufferid INTEGER NOT NULL,
    senderid INTEGER NOT NULL,
    message VARCHAR,
    PRIMARY KEY (id),
    FOREIGN KEY(bufferid) REFERENCES {BUFFER_TABLE} (id),
    FOREIGN KEY(senderid) REFERENCES {SENDER_TABLE} (id)
);
CREATE INDEX IF NOT EXISTS logTimestamp ON {LOG_TABLE}(timestamp);
"""

_SELECT_SQL = {
    EntityKind.NETWORK: f"SELECT id, name FROM {NETWORK_TABLE} ORDER BY id ASC",
    EntityKind.BUFFER: f"SELECT id, networkid, name FROM {BUFFER_TABLE} ORDER BY id ASC",
    EntityKind.SENDER: f"SELECT id, nick, user, host FROM {SENDER_TABLE} ORDER BY id ASC",
}


class SqliteLogStore:
    """SQLite-backed implementation of ``LogStore``.

    The connection runs in autocommit mode; batches are delimited with
    explicit ``BEGIN`` and ``COMMIT`` statements issued by the driver.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Open or create the database and ensure the schema.

        Args:
            db_path: Database file path, or ``:memory:``.

        Raises:
            IrclogStorageError: If the database cannot be opened or initialized.
        """
        self.db_path = str(db_path)
        try:
            self._conn = sqlite3.connect(self.db_path, isolation_level=None)
        except sqlite3.Error as error:
            raise IrclogStorageError(
                f"Failed to open store at {self.db_path}: {error}. "
                "Check that the parent directory exists and is writable."
            ) from error
        self._run("enable foreign keys", lambda: self._conn.execute("PRAGMA foreign_keys = ON"))
        self._run("create schema", lambda: self._conn.executescript(_SCHEMA_SQL))
        _LOGGER.info("store_opened", db_path=self.db_path)

    def __enter__(self) -> "SqliteLogStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def load_all(self, kind: EntityKind) -> list[DimensionEntity]:
        """Load every row of a dimension table.

        Args:
            kind: Table to load.

        Returns:
            Entities in ascending id order.
        """
        rows = self._run(
            f"load {kind.value} rows",
            lambda: self._conn.execute(_SELECT_SQL[kind]).fetchall(),
        )
        return [_entity_from_row(kind, row) for row in rows]

    def insert(self, entity: StoredEntity) -> int:
        """Insert a network, buffer, sender, or message row.

        Args:
            entity: Entity to persist; its ``id`` field is ignored.

        Returns:
            Store-assigned row id.

        Raises:
            IrclogStorageError: On constraint violations or I/O failures.
        """
        table, columns, values = _insert_payload(entity)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        cursor = self._run(f"insert {table} row", lambda: self._conn.execute(sql, values))
        return int(cursor.lastrowid)

    def begin_transaction(self) -> None:
        self._run("begin transaction", lambda: self._conn.execute("BEGIN"))

    def commit_transaction(self) -> None:
        self._run("commit transaction", lambda: self._conn.execute("COMMIT"))

    def close(self) -> None:
        """Close the connection, discarding any uncommitted batch."""
        self._run("close store", self._conn.close)

    def _run(self, operation: str, action: Callable[[], Any]) -> Any:
        """Run one sqlite call and wrap failures with operation context."""
        try:
            return action()
        except sqlite3.Error as error:
            raise IrclogStorageError(
                f"Failed to {operation} in {self.db_path}: {error}."
            ) from error


def _entity_from_row(kind: EntityKind, row: Sequence[Any]) -> DimensionEntity:
    """Map a selected row onto its typed entity."""
    if kind is EntityKind.NETWORK:
        return Network(id=row[0], name=row[1] or "")
    if kind is EntityKind.BUFFER:
        return Buffer(id=row[0], network_id=row[1], name=row[2] or "")
    return Sender(id=row[0], nick=row[1] or "", user=row[2] or "", host=row[3] or "")


def _insert_payload(entity: StoredEntity) -> tuple[str, tuple[str, ...], tuple[Any, ...]]:
    """Return table, column names, and bound values for an insert."""
    if isinstance(entity, Message):
        return (
            LOG_TABLE,
            ("timestamp", "type", "bufferid", "senderid", "message"),
            (
                entity.timestamp,
                int(MessageType(entity.type)),
                entity.buffer_id,
                entity.sender_id,
                entity.text,
            ),
        )
    if isinstance(entity, Sender):
        return SENDER_TABLE, ("nick", "user", "host"), (entity.nick, entity.user, entity.host)
    if isinstance(entity, Buffer):
        return BUFFER_TABLE, ("networkid", "name"), (entity.network_id, entity.name)
    if isinstance(entity, Network):
        return NETWORK_TABLE, ("name",), (entity.name,)
    raise IrclogStorageError(
        f"Failed to insert {type(entity).__name__}: unsupported entity type."
    )

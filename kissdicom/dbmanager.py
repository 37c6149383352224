"""Thread-safe access to the application's SQLite database."""

from __future__ import annotations

import os
import sqlite3
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from . import config

PathLike = Union[str, os.PathLike]


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a statement fails."""


class SQLiteType(Enum):
    """Column types usable with DbManager.create_table, with their SQL text."""

    NULL = "NULL"
    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"
    BLOB = "BLOB"
    VARCHAR_64 = "VARCHAR ( 64 )"
    TIMESTAMP = "TimeStamp"
    TIMESTAMP_NOT_NULL = "TimeStamp NOT NULL"


def _is_empty_value(value: Any) -> bool:
    return value is None or value == "" or value == b""


class DbManager:
    """One SQLite database file, opened and closed around each unit of work.

    Opening takes a lock that is held until the matching close, so one
    thread works with the database at a time.  The object is also a context
    manager doing the same.
    """

    def __init__(self, path: PathLike = config.DB_NAME) -> None:
        self.path = Path(path)
        self._connection: Optional[sqlite3.Connection] = None
        self._file_lock = threading.RLock()
        self._data_lock = threading.RLock()
        self._depth = 0

    def __enter__(self) -> "DbManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def create_file(self) -> None:
        """Create the database file, empty, if it does not exist yet."""
        if self.path.exists():
            return
        try:
            self.path.touch()
        except OSError as exc:
            raise DatabaseError(f"database file could not be created: {exc}") from exc

    def open(self) -> None:
        """Take the database lock and open the connection if needed."""
        self._file_lock.acquire()
        self._depth += 1
        with self._data_lock:
            if self._connection is not None:
                return
            try:
                self._connection = sqlite3.connect(
                    str(self.path), isolation_level=None, check_same_thread=False
                )
            except sqlite3.Error as exc:
                self._depth -= 1
                self._file_lock.release()
                raise DatabaseError(f"database open error: {exc}") from exc

    def close(self) -> None:
        """Release the database lock; the last close shuts the connection."""
        if self._depth == 0:
            return
        try:
            self._file_lock.release()
        except RuntimeError:
            return
        self._depth -= 1
        if self._depth == 0:
            with self._data_lock:
                if self._connection is not None:
                    self._connection.close()
                    self._connection = None

    def is_open(self) -> bool:
        """Tell whether the connection is open."""
        with self._data_lock:
            return self._connection is not None

    def _run(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        with self._data_lock:
            if self._connection is None:
                raise DatabaseError("database not open")
            try:
                return self._connection.execute(sql, tuple(params)).fetchall()
            except sqlite3.Error as exc:
                raise DatabaseError(f"sql exec error: {exc}") from exc

    def table_exists(self, table_name: str) -> bool:
        """Tell whether a table of that name exists."""
        rows = self._run(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        return bool(rows and rows[0][0])

    def create_table(
        self,
        table_name: str,
        keys: Sequence[str],
        types: Sequence[SQLiteType],
    ) -> None:
        """Create a table whose first key is the primary key."""
        if len(keys) != len(types):
            raise ValueError("keys and types differ in length")
        if not keys:
            raise ValueError("a table needs at least one column")
        columns = [f"{keys[0]} {SQLiteType(types[0]).value} PRIMARY KEY "]
        columns.extend(
            f"{key} {SQLiteType(kind).value} " for key, kind in zip(keys[1:], types[1:])
        )
        self._run(f"CREATE TABLE {table_name} ({','.join(columns)});")

    def remove_table(self, table_name: str) -> None:
        """Drop a table."""
        self._run(f"DROP TABLE '{table_name}'")

    def column_exists(self, table_name: str, column_name: str) -> bool:
        """Tell whether the table's definition mentions the column."""
        rows = self._run(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' "
            "AND name = ? AND sql LIKE ?",
            (table_name, f"%{column_name}%"),
        )
        return bool(rows and rows[0][0])

    def update(self, table_name: str, values: Mapping[str, Any], where: str = "") -> None:
        """Set the given columns on the rows matching the where clause."""
        if not values:
            raise ValueError("no values to update")
        keys = sorted(values)
        assignments = ",".join(f"{key}=?" for key in keys)
        sql = f"UPDATE {table_name} SET {assignments}"
        if where:
            sql += f" WHERE {where}"
        self._run(sql, [values[key] for key in keys])

    def remove(self, table_name: str, where: str = "") -> None:
        """Delete the rows matching the where clause."""
        self._run(f"DELETE FROM {table_name} WHERE {where}")

    def insert(self, table_name: str, values: Mapping[str, Any]) -> None:
        """Insert one row; empty values are stored as "--"."""
        if not values:
            raise ValueError("no values to insert")
        keys = sorted(values)
        placeholders = ",".join("?" for _ in keys)
        params = ["--" if _is_empty_value(values[key]) else values[key] for key in keys]
        self._run(
            f"INSERT INTO {table_name}({','.join(keys)}) VALUES({placeholders})",
            params,
        )

    def select(
        self, table_name: str, columns: Iterable[str], where: str = ""
    ) -> list[dict[str, Any]]:
        """Return the chosen columns of the matching rows as dictionaries."""
        names = list(columns)
        if not names:
            raise ValueError("no columns to select")
        sql = f"SELECT {','.join(names)} FROM {table_name}"
        if where:
            sql += f" WHERE {where}"
        return [dict(zip(names, row)) for row in self._run(sql)]

    def execute(self, sql: str) -> None:
        """Run one SQL statement."""
        self._run(sql)
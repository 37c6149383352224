"""Event log kept in a table of the application database."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Callable, Union

from .dbmanager import DbManager, SQLiteType


class EventType(IntEnum):
    """Kinds of logged events."""

    ALL_TYPE = 0
    SYS_INFO = 1
    SYS_WARN = 2
    SYS_ERROR = 3

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    EventType.ALL_TYPE: "All Type",
    EventType.SYS_INFO: "System Info",
    EventType.SYS_WARN: "System Warn",
    EventType.SYS_ERROR: "System Error",
}

_COLUMNS = ("LogTime", "UserName", "EventType", "EventContent")
_TYPES = (
    SQLiteType.TIMESTAMP_NOT_NULL,
    SQLiteType.VARCHAR_64,
    SQLiteType.VARCHAR_64,
    SQLiteType.TEXT,
)


def _format_log_time(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


class LogDao:
    """Writes events to the log table of a database."""

    TABLE_NAME = "LogTable"

    def __init__(self, db: DbManager, clock: Callable[[], datetime] = datetime.now) -> None:
        self.db = db
        self.clock = clock

    def initialize(self) -> None:
        """Create the log table, replacing one that lacks the expected columns."""
        with self.db:
            if not self.db.table_exists(self.TABLE_NAME):
                self._create_table()
            elif not self._check_table():
                self.db.remove_table(self.TABLE_NAME)
                self._create_table()

    def insert_message(
        self, name: str, event_type: Union[EventType, int], message: str
    ) -> None:
        """Record one event, stamped with the current time."""
        try:
            kind = EventType(event_type)
            content = message
        except ValueError:
            kind = EventType.SYS_ERROR
            content = f"Error while logging message: {message}."
        data = {
            "UserName": name,
            "EventType": kind.label,
            "EventContent": content,
            "LogTime": _format_log_time(self.clock()),
        }
        with self.db:
            self.db.insert(self.TABLE_NAME, data)

    def _create_table(self) -> None:
        self.db.create_table(self.TABLE_NAME, list(_COLUMNS), list(_TYPES))

    def _check_table(self) -> bool:
        return all(self.db.column_exists(self.TABLE_NAME, column) for column in _COLUMNS)
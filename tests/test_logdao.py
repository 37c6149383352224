from datetime import datetime, timedelta

import pytest

from kissdicom.dbmanager import DatabaseError, DbManager
from kissdicom.logdao import EventType, LogDao

COLUMNS = ["LogTime", "UserName", "EventType", "EventContent"]


class _Clock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def db(tmp_path):
    return DbManager(tmp_path / "log.sqlite")


@pytest.fixture
def dao(db):
    log = LogDao(db, clock=_Clock(datetime(2024, 1, 2, 3, 4, 5, 678000)))
    log.initialize()
    return log


def _rows(db):
    with db:
        return db.select(LogDao.TABLE_NAME, COLUMNS)


def test_labels_stored_for_each_type(db, dao):
    for kind in EventType:
        dao.insert_message("admin", kind, "msg")
    rows = sorted(_rows(db), key=lambda r: r["LogTime"])
    assert [r["EventType"] for r in rows] == [
        "All Type",
        "System Info",
        "System Warn",
        "System Error",
    ]


def test_initialize_creates_table(db, dao):
    with db:
        assert db.table_exists("LogTable") is True
        assert all(db.column_exists("LogTable", c) for c in COLUMNS)
    assert db.is_open() is False


def test_initialize_twice_keeps_rows(db, dao):
    dao.insert_message("admin", EventType.SYS_INFO, "started")
    dao.initialize()
    assert len(_rows(db)) == 1


def test_insert_message(db, dao):
    dao.insert_message("admin", EventType.SYS_WARN, "disk low")
    assert _rows(db) == [
        {
            "LogTime": "2024-01-02 03:04:05.678",
            "UserName": "admin",
            "EventType": "System Warn",
            "EventContent": "disk low",
        }
    ]


def test_insert_message_accepts_int(db, dao):
    dao.insert_message("admin", 1, "hello")
    assert _rows(db)[0]["EventType"] == EventType.SYS_INFO.label


def test_invalid_type_logged_as_error(db, dao):
    dao.insert_message("admin", 9, "oops")
    row = _rows(db)[0]
    assert row["EventType"] == "System Error"
    assert row["EventContent"] == "Error while logging message: oops."


def test_empty_user_stored_as_dashes(db, dao):
    dao.insert_message("", EventType.SYS_INFO, "anonymous")
    assert _rows(db)[0]["UserName"] == "--"


def test_same_timestamp_rejected(db):
    fixed = datetime(2024, 5, 6, 7, 8, 9)
    log = LogDao(db, clock=lambda: fixed)
    log.initialize()
    log.insert_message("admin", EventType.SYS_INFO, "one")
    with pytest.raises(DatabaseError):
        log.insert_message("admin", EventType.SYS_INFO, "two")
    assert db.is_open() is False


def test_broken_table_is_replaced(db):
    with db:
        db.execute("CREATE TABLE LogTable (Foo TEXT)")
    LogDao(db).initialize()
    with db:
        assert db.column_exists("LogTable", "EventContent") is True
        assert db.column_exists("LogTable", "Foo") is False


def test_messages_in_order(db, dao):
    dao.insert_message("a", EventType.SYS_INFO, "first")
    dao.insert_message("b", EventType.SYS_ERROR, "second")
    rows = sorted(_rows(db), key=lambda r: r["LogTime"])
    assert [r["EventContent"] for r in rows] == ["first", "second"]
    assert rows[0]["LogTime"] < rows[1]["LogTime"]
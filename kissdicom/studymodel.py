"""Table of the studies stored in the database, with selection handling."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Iterable, Optional

from .dbmanager import DbManager
from .studydao import StudyDao
from .utils import sex_to_display


class StudyColumn(IntEnum):
    """Columns of the study table, in table order."""

    STUDY_UID = 0
    ACC_NUMBER = 1
    PATIENT_ID = 2
    PATIENT_NAME = 3
    PATIENT_SEX = 4
    PATIENT_BIRTH = 5
    PATIENT_AGE = 6
    STUDY_TIME = 7
    MODALITY = 8
    STUDY_DESC = 9


FIELDS = (
    "StudyUid",
    "AccNumber",
    "PatientId",
    "PatientName",
    "PatientSex",
    "PatientBirth",
    "PatientAge",
    "StudyTime",
    "Modality",
    "StudyDesc",
)

_HEADERS = {
    StudyColumn.ACC_NUMBER: "Acc Number",
    StudyColumn.PATIENT_ID: "Patient ID",
    StudyColumn.PATIENT_NAME: "Name",
    StudyColumn.PATIENT_SEX: "Sex",
    StudyColumn.PATIENT_BIRTH: "Birthdate",
    StudyColumn.PATIENT_AGE: "Age",
    StudyColumn.STUDY_TIME: "Study Time",
    StudyColumn.MODALITY: "Modality",
    StudyColumn.STUDY_DESC: "Study Desc",
}

_AGE_UNITS = {"Y": "Years", "M": "Months", "W": "Weeks", "D": "Days"}


def format_age(age: str) -> str:
    """Spell out the unit of a DICOM age string such as 030Y."""
    unit = _AGE_UNITS.get(age[-1:].upper())
    if unit is None:
        return age
    return f"{age[:-1]}{unit}"


class StudyTableModel:
    """Rows of the study table, newest study first, and the selected studies."""

    def __init__(
        self,
        db: DbManager,
        on_selection_changed: Optional[Callable[[list[str]], None]] = None,
    ) -> None:
        self.db = db
        self.on_selection_changed = on_selection_changed
        self._rows: list[dict[str, Any]] = []
        self._selected: list[str] = []

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def selected_uids(self) -> list[str]:
        """Uids of the selected studies, in selection order."""
        return list(self._selected)

    def record(self, row: int) -> dict[str, Any]:
        """All fields of one row."""
        return dict(self._rows[row])

    def select(self) -> int:
        """Reload the rows, clearing the selection; return the row count."""
        self._set_selection([])
        with self.db:
            rows = self.db.select(StudyDao.STUDY_TABLE, FIELDS)
        rows.sort(key=lambda r: str(r["StudyTime"] or ""), reverse=True)
        self._rows = rows
        return len(rows)

    def display(self, row: int, column: int) -> Any:
        """The value shown in a cell."""
        col = StudyColumn(column)
        value = self._rows[row][FIELDS[col]]
        if col is StudyColumn.PATIENT_SEX:
            return sex_to_display(str(value or ""))
        if col is StudyColumn.PATIENT_AGE:
            return format_age(str(value or ""))
        return value

    def header(self, section: int) -> Optional[str]:
        """The column title; the field name where none is defined."""
        try:
            col = StudyColumn(section)
        except ValueError:
            return None
        return _HEADERS.get(col, FIELDS[col])

    def select_rows(self, rows: Iterable[int]) -> list[str]:
        """Make the given rows the selection; return their study uids."""
        uids: list[str] = []
        seen: set[int] = set()
        for row in rows:
            if row in seen:
                continue
            seen.add(row)
            uids.append(str(self._rows[row]["StudyUid"]))
        self._set_selection(uids)
        return list(uids)

    def first_selected_uid(self) -> str:
        """Uid of the first selected study, or an empty string."""
        return self._selected[0] if self._selected else ""

    def remove_selected(self, dao: StudyDao) -> int:
        """Remove the selected studies with their images; return how many."""
        for uid in self._selected:
            dao.remove_study(uid)
        return len(self._selected)

    def _set_selection(self, uids: list[str]) -> None:
        self._selected = uids
        if self.on_selection_changed is not None:
            self.on_selection_changed(list(uids))
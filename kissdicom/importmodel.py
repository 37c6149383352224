"""Table of studies found while scanning files for import."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable, Optional

from .records import StudyRecord
from .utils import sex_to_display


class ImportColumn(IntEnum):
    """Columns of the import table."""

    ACC_NUMBER = 0
    PATIENT_ID = 1
    PATIENT_NAME = 2
    PATIENT_SEX = 3
    PATIENT_BIRTH = 4
    STUDY_TIME = 5
    MODALITY = 6
    INSTITUTION = 7
    IMAGES = 8
    STUDY_STATUS = 9


_HEADERS = {
    ImportColumn.ACC_NUMBER: "Acc Number",
    ImportColumn.PATIENT_ID: "Patient Id",
    ImportColumn.PATIENT_NAME: "Patient Name",
    ImportColumn.PATIENT_SEX: "Sex",
    ImportColumn.PATIENT_BIRTH: "Birthdate",
    ImportColumn.STUDY_TIME: "Study Time",
    ImportColumn.MODALITY: "Modality",
    ImportColumn.INSTITUTION: "Institution",
    ImportColumn.IMAGES: "Images",
    ImportColumn.STUDY_STATUS: "Status",
}


class ImportStudyModel:
    """Studies waiting to be imported, one row each, merged by study uid."""

    def __init__(self) -> None:
        self._studies: list[StudyRecord] = []

    def __len__(self) -> int:
        return len(self._studies)

    @property
    def studies(self) -> list[StudyRecord]:
        """The studies in row order."""
        return list(self._studies)

    def append_study(self, study: Optional[StudyRecord]) -> Optional[int]:
        """Add a study, or merge its images into a row with the same uid.

        Returns the row the study ended up in, or None if nothing was given.
        """
        if study is None:
            return None
        for row, existing in enumerate(self._studies):
            if existing.study_uid == study.study_uid:
                existing.images.extend(study.images)
                study.images.clear()
                return row
        self._studies.append(study)
        return len(self._studies) - 1

    def append_studies(self, studies: Iterable[Optional[StudyRecord]]) -> None:
        """Add several studies in order."""
        for study in studies:
            self.append_study(study)

    def remove_rows(self, row: int, count: int) -> None:
        """Remove count rows starting at row."""
        if count < 0 or row < 0 or row + count > len(self._studies):
            raise IndexError("rows out of range")
        del self._studies[row:row + count]

    def remove_selected(self, rows: Iterable[int]) -> None:
        """Remove the given rows, whatever order they come in."""
        for row in sorted(set(rows), reverse=True):
            self.remove_rows(row, 1)

    def clear(self) -> None:
        """Remove every row."""
        self._studies.clear()

    def file_count(self) -> int:
        """Total number of images over all studies."""
        return sum(len(study.images) for study in self._studies)

    def selected_study_uids(self, rows: Iterable[int]) -> list[str]:
        """Study uids of the given rows, in the order given."""
        return [self._studies[row].study_uid for row in rows]

    def display_value(self, row: int, column: int) -> Any:
        """The value shown in a cell, or None outside the table."""
        if not 0 <= row < len(self._studies):
            return None
        try:
            col = ImportColumn(column)
        except ValueError:
            return None
        study = self._studies[row]
        if col is ImportColumn.ACC_NUMBER:
            return study.acc_number
        if col is ImportColumn.PATIENT_ID:
            return study.patient_id
        if col is ImportColumn.PATIENT_NAME:
            return study.patient_name
        if col is ImportColumn.PATIENT_SEX:
            return sex_to_display(study.patient_sex)
        if col is ImportColumn.PATIENT_BIRTH:
            return study.patient_birth
        if col is ImportColumn.STUDY_TIME:
            return study.study_time
        if col is ImportColumn.MODALITY:
            return study.modality
        if col is ImportColumn.INSTITUTION:
            return study.institution
        if col is ImportColumn.IMAGES:
            return len(study.images)
        return study.status

    def header(self, section: int) -> Optional[str]:
        """The column title, or None for an unknown column."""
        try:
            return _HEADERS[ImportColumn(section)]
        except ValueError:
            return None
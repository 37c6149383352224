"""Table of the images stored in the database, filtered by study."""

from __future__ import annotations

import os
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from . import config
from .dbmanager import DbManager
from .studydao import StudyDao

PathLike = Union[str, os.PathLike]


class ImageColumn(IntEnum):
    """Columns of the image table, in table order."""

    IMAGE_UID = 0
    SOP_CLASS_UID = 1
    SERIES_UID = 2
    STUDY_UID = 3
    REF_IMAGE_UID = 4
    IMAGE_NO = 5
    IMAGE_TIME = 6
    IMAGE_DESC = 7
    IMAGE_FILE = 8


FIELDS = (
    "ImageUid",
    "SopClassUid",
    "SeriesUid",
    "StudyUid",
    "RefImageUid",
    "ImageNo",
    "ImageTime",
    "ImageDesc",
    "ImageFile",
)

_HEADERS = {
    ImageColumn.IMAGE_NO: "Image No.",
    ImageColumn.IMAGE_TIME: "Image Time",
    ImageColumn.IMAGE_DESC: "Image Desc",
    ImageColumn.IMAGE_FILE: "Image File",
}


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class ImageTableModel:
    """Rows of the image table, newest image first, limited by a filter."""

    def __init__(self, db: DbManager) -> None:
        self.db = db
        self.filter = ""
        self._rows: list[dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._rows)

    def value(self, row: int, column: int) -> Any:
        """The stored value of a cell."""
        return self._rows[row][FIELDS[ImageColumn(column)]]

    def filter_by_studies(self, study_uids: Iterable[str]) -> str:
        """Show only images of the given studies, reload, and return the filter."""
        uids = list(study_uids)
        if uids:
            self.filter = " OR ".join(f"StudyUid={_quote(uid)}" for uid in uids)
        else:
            self.filter = "StudyUid IS NULL"
        self.select()
        return self.filter

    def select(self) -> int:
        """Reload the rows matching the filter; return the row count."""
        with self.db:
            rows = self.db.select(StudyDao.IMAGE_TABLE, FIELDS, self.filter)
        rows.sort(key=lambda r: str(r["ImageTime"] or ""), reverse=True)
        self._rows = rows
        return len(rows)

    def header(self, section: int) -> Optional[str]:
        """The column title; the field name where none is defined."""
        try:
            col = ImageColumn(section)
        except ValueError:
            return None
        return _HEADERS.get(col, FIELDS[col])

    def all_image_files(self) -> list[str]:
        """Stored file names of every row."""
        return [str(row["ImageFile"]) for row in self._rows]

    def image_files(self, rows: Iterable[int]) -> list[str]:
        """Stored file names of the given rows."""
        return [str(self._rows[row]["ImageFile"]) for row in rows]

    def remove_images(self, rows: Iterable[int], dao: StudyDao) -> int:
        """Remove the images of the given rows; return how many were recorded."""
        uids = [str(self._rows[row]["ImageUid"]) for row in rows]
        return sum(1 for uid in uids if dao.remove_image(uid))

    def remove_all(self, dao: StudyDao) -> int:
        """Remove every image of every study shown; return how many."""
        study_uids = list(dict.fromkeys(str(row["StudyUid"]) for row in self._rows))
        return sum(dao.remove_study_images(uid) for uid in study_uids)

    def directory_of(
        self, rows: Iterable[int], storage_dir: PathLike = config.DICOM_SAVE_PATH
    ) -> Path:
        """Folder holding the file of the first of the given rows."""
        files = self.image_files(rows)
        if not files:
            raise ValueError("no image selected")
        return (Path(storage_dir) / files[0]).parent
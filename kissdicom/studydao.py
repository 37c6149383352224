"""Study and image tables of the application database."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from . import config
from .dbmanager import DbManager
from .records import ImageRecord, StudyRecord
from .utils import delete_path

PathLike = Union[str, os.PathLike]

_CREATE_STATEMENTS = (
    "CREATE TABLE IF NOT EXISTS StudyTable("
    "StudyUid VARCHAR(128) PRIMARY KEY NOT NULL,"
    "AccNumber VARCHAR(64) NOT NULL, PatientId VARCHAR(64) NOT NULL,"
    "PatientName VARCHAR(64), "
    "PatientSex VARCHAR(2) NOT NULL,"
    "PatientBirth DATE NOT NULL,"
    "PatientAge VARCHAR(6),"
    "StudyTime DATETIME NOT NULL,"
    "Modality VARCHAR(2) NOT NULL, "
    "StudyDesc TEXT)",
    "CREATE INDEX IF NOT EXISTS IX_StudyTable_StudyDate ON StudyTable(StudyTime)",
    "CREATE TABLE IF NOT EXISTS ImageTable("
    "ImageUid VARCHAR(128) PRIMARY KEY NOT NULL,"
    "SopClassUid VARCHAR(128) NOT NULL,"
    "SeriesUid VARCHAR(128) NOT NULL, "
    "StudyUid VARCHAR(128) NOT NULL,"
    "RefImageUid VARCHAR(128),"
    "ImageNo VARCHAR(16), "
    "ImageTime DATETIME NOT NULL,"
    "ImageDesc TEXT,"
    "ImageFile TEXT,"
    "FOREIGN KEY(StudyUid) REFERENCES StudyTable(StudyUid))",
    "CREATE INDEX IF NOT EXISTS IX_ImageTable_ImageTime ON ImageTable(ImageTime)",
)


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _format_datetime(moment) -> str:
    return moment.strftime(config.NORMAL_DATETIME_FORMAT) if moment else ""


class StudyDao:
    """Stores studies and their images, and the image files kept on disk."""

    STUDY_TABLE = "StudyTable"
    IMAGE_TABLE = "ImageTable"

    def __init__(
        self, db: DbManager, storage_dir: PathLike = config.DICOM_SAVE_PATH
    ) -> None:
        self.db = db
        self.storage_dir = Path(storage_dir)

    def initialize(self) -> None:
        """Create the tables, rebuilding them if one of them is missing."""
        with self.db:
            if not self.db.table_exists(self.STUDY_TABLE):
                self._create_tables()
            elif not self._check_tables():
                self.db.remove_table(self.STUDY_TABLE)
                self._create_tables()

    def insert_study(self, study: StudyRecord) -> None:
        """Insert one study row."""
        birth = (
            study.patient_birth.strftime(config.NORMAL_DATE_FORMAT)
            if study.patient_birth
            else ""
        )
        data = {
            "StudyUid": study.study_uid,
            "AccNumber": study.acc_number,
            "PatientId": study.patient_id,
            "PatientName": study.patient_name,
            "PatientSex": study.patient_sex,
            "PatientBirth": birth,
            "PatientAge": study.patient_age,
            "StudyTime": _format_datetime(study.study_time),
            "Modality": study.modality,
            "StudyDesc": study.study_desc,
        }
        with self.db:
            self.db.insert(self.STUDY_TABLE, data)

    def remove_study(self, study_uid: str) -> None:
        """Remove a study together with all of its images and their files."""
        if not study_uid:
            raise ValueError("study uid must not be empty")
        with self.db:
            self.db.remove(self.STUDY_TABLE, f"StudyUid = {_quote(study_uid)}")
        self.remove_study_images(study_uid)

    def has_study(self, study_uid: str) -> bool:
        """Tell whether exactly one study has this uid."""
        if not study_uid:
            return False
        with self.db:
            rows = self.db.select(
                self.STUDY_TABLE, ["StudyUid"], f"StudyUid = {_quote(study_uid)}"
            )
        return len(rows) == 1

    def insert_image(self, image: ImageRecord) -> None:
        """Insert one image row."""
        data = {
            "ImageUid": image.image_uid,
            "SopClassUid": image.sop_class_uid,
            "SeriesUid": image.series_uid,
            "StudyUid": image.study_uid,
            "RefImageUid": image.ref_image_uid,
            "ImageNo": image.image_number,
            "ImageTime": _format_datetime(image.image_time),
            "ImageDesc": image.image_desc,
            "ImageFile": image.image_file,
        }
        with self.db:
            self.db.insert(self.IMAGE_TABLE, data)

    def remove_image(self, image_uid: str) -> bool:
        """Remove an image row and its file; True if the image was recorded."""
        if not image_uid:
            raise ValueError("image uid must not be empty")
        where = f"ImageUid = {_quote(image_uid)}"
        with self.db:
            rows = self.db.select(self.IMAGE_TABLE, ["ImageFile"], where)
            found = len(rows) == 1
            if found:
                image_file = rows[0]["ImageFile"]
                if image_file:
                    delete_path(self.storage_dir / str(image_file))
            self.db.remove(self.IMAGE_TABLE, where)
        return found

    def remove_study_images(self, study_uid: str) -> int:
        """Remove every image of a study; return how many were removed."""
        if not study_uid:
            raise ValueError("study uid must not be empty")
        with self.db:
            rows = self.db.select(
                self.IMAGE_TABLE, ["ImageUid"], f"StudyUid = {_quote(study_uid)}"
            )
        uids = [str(row["ImageUid"]) for row in rows if row["ImageUid"]]
        return sum(1 for uid in uids if self.remove_image(uid))

    def update_image_file(self, image_uid: str, image_file: str) -> None:
        """Point an existing image row at another file."""
        if not image_uid:
            raise ValueError("image uid must not be empty")
        if not image_file:
            raise ValueError("image file must not be empty")
        with self.db:
            self.db.update(
                self.IMAGE_TABLE,
                {"ImageFile": image_file},
                f"ImageUid = {_quote(image_uid)}",
            )

    def has_image(self, image_uid: str) -> bool:
        """Tell whether exactly one image has this uid."""
        if not image_uid:
            return False
        with self.db:
            rows = self.db.select(
                self.IMAGE_TABLE, ["ImageUid"], f"ImageUid = {_quote(image_uid)}"
            )
        return len(rows) == 1

    def _create_tables(self) -> None:
        for statement in _CREATE_STATEMENTS:
            self.db.execute(statement)

    def _check_tables(self) -> bool:
        return self.db.table_exists(self.STUDY_TABLE) and self.db.table_exists(
            self.IMAGE_TABLE
        )
"""Copying scanned studies into the image store and recording them."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from . import config
from .dbmanager import DatabaseError
from .importmodel import ImportStudyModel
from .records import StudyRecord
from .studydao import StudyDao
from .utils import copy_file, delete_path, make_dir, random_string

PathLike = Union[str, os.PathLike]

XA_IMAGE_STORAGE = "1.2.840.10008.5.1.4.1.1.12.1"


def study_dir_name(study: StudyRecord) -> str:
    """Relative folder of a study in the store: yyyyMM/yyyyMMddhhmmss_accnumber."""
    moment = study.study_time
    month = moment.strftime("%Y%m") if moment else ""
    stamp = moment.strftime(config.DICOM_DATETIME_FORMAT) if moment else ""
    return f"{month}/{stamp}_{study.acc_number}"


class ImportJob:
    """Imports every study of an import model into the store and the database."""

    def __init__(
        self,
        model: ImportStudyModel,
        dao: StudyDao,
        storage_dir: Optional[PathLike] = None,
        name_factory: Callable[[], str] = random_string,
    ) -> None:
        self.model = model
        self.dao = dao
        self.storage_dir = Path(storage_dir) if storage_dir is not None else dao.storage_dir
        self.name_factory = name_factory
        self._aborted = threading.Event()

    def abort(self) -> None:
        """Ask the job to stop before the next study."""
        self._aborted.set()

    def run(self, progress: Optional[Callable[[], None]] = None) -> int:
        """Import the studies; return the number of images imported.

        progress, if given, is called once after each image is handled.
        """
        total = 0
        for study in self.model.studies:
            if self._aborted.is_set():
                break
            imported = self._import_study(study, progress)
            study.status = f"Imported: Images {imported}."
            total += imported
        return total

    def _import_study(
        self, study: StudyRecord, progress: Optional[Callable[[], None]]
    ) -> int:
        imported = 0
        dir_name = study_dir_name(study)
        if not self.dao.has_study(study.study_uid):
            try:
                self.dao.insert_study(study)
            except DatabaseError:
                pass
        make_dir(self.storage_dir / dir_name)
        for image in study.images:
            prefix = "XA_" if image.sop_class_uid == XA_IMAGE_STORAGE else ""
            src_file = image.image_file
            image.image_file = f"{dir_name}/{prefix}{self.name_factory()}.dcm"
            target = self.storage_dir / image.image_file
            try:
                if copy_file(src_file, target):
                    if self._record_image(image, target):
                        imported += 1
            finally:
                image.image_file = src_file
            if progress is not None:
                progress()
        return imported

    def _record_image(self, image, target: Path) -> bool:
        if not self.dao.has_image(image.image_uid):
            try:
                self.dao.insert_image(image)
            except DatabaseError:
                return False
            return True
        try:
            self.dao.update_image_file(image.image_uid, image.image_file)
        except (DatabaseError, ValueError):
            delete_path(target)
            return False
        return True
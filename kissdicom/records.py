"""Plain records describing a study and the images that belong to it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class ImageRecord:
    """One DICOM image (SOP instance) of a study."""

    image_uid: str = ""
    sop_class_uid: str = ""
    series_uid: str = ""
    study_uid: str = ""
    ref_image_uid: str = ""
    image_number: str = ""
    image_time: Optional[datetime] = None
    image_desc: str = ""
    image_file: str = ""


@dataclass
class StudyRecord:
    """One study with its patient data and the images collected for it."""

    study_uid: str = ""
    acc_number: str = ""
    patient_id: str = ""
    patient_name: str = ""
    patient_sex: str = ""
    patient_birth: Optional[date] = None
    patient_age: str = ""
    study_time: Optional[datetime] = None
    modality: str = ""
    institution: str = ""
    status: str = ""
    study_desc: str = ""
    images: list[ImageRecord] = field(default_factory=list)
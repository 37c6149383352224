from datetime import datetime

import pytest

from kissdicom.dbmanager import DbManager
from kissdicom.imagemodel import ImageColumn, ImageTableModel
from kissdicom.records import ImageRecord
from kissdicom.studydao import StudyDao


@pytest.fixture
def dao(tmp_path):
    db = DbManager(tmp_path / "test.sqlite")
    db.create_file()
    study_dao = StudyDao(db, tmp_path / "store")
    study_dao.initialize()
    entries = [
        ("i1", "s1", datetime(2021, 1, 1, 8, 0, 0)),
        ("i2", "s1", datetime(2021, 1, 2, 8, 0, 0)),
        ("i3", "s2", datetime(2021, 1, 3, 8, 0, 0)),
    ]
    for uid, study_uid, moment in entries:
        rel = f"dir_{study_uid}/{uid}.dcm"
        path = tmp_path / "store" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x")
        study_dao.insert_image(
            ImageRecord(
                image_uid=uid,
                sop_class_uid="1.2",
                series_uid="3.4",
                study_uid=study_uid,
                image_time=moment,
                image_file=rel,
            )
        )
    return study_dao


def test_filter_by_one_study(dao):
    model = ImageTableModel(dao.db)
    assert model.filter_by_studies(["s1"]) == "StudyUid='s1'"
    assert len(model) == 2
    assert model.value(0, ImageColumn.IMAGE_UID) == "i2"
    assert model.all_image_files() == ["dir_s1/i2.dcm", "dir_s1/i1.dcm"]


def test_filter_by_several_studies(dao):
    model = ImageTableModel(dao.db)
    assert model.filter_by_studies(["s1", "s2"]) == "StudyUid='s1' OR StudyUid='s2'"
    assert len(model) == 3
    assert {model.value(r, ImageColumn.STUDY_UID) for r in range(3)} == {"s1", "s2"}


def test_filter_without_studies_shows_nothing(dao):
    model = ImageTableModel(dao.db)
    assert model.filter_by_studies([]) == "StudyUid IS NULL"
    assert len(model) == 0


def test_header():
    model = ImageTableModel(DbManager(":memory:"))
    assert model.header(ImageColumn.IMAGE_NO) == "Image No."
    assert model.header(ImageColumn.IMAGE_FILE) == "Image File"
    assert model.header(ImageColumn.IMAGE_UID) == "ImageUid"
    assert model.header(99) is None


def test_image_files_of_rows(dao):
    model = ImageTableModel(dao.db)
    model.filter_by_studies(["s1", "s2"])
    files = model.image_files([2, 0])
    assert files == [model.all_image_files()[2], model.all_image_files()[0]]


def test_remove_images(dao):
    model = ImageTableModel(dao.db)
    model.filter_by_studies(["s1"])
    target = dao.storage_dir / model.image_files([0])[0]
    uid = model.value(0, ImageColumn.IMAGE_UID)
    assert model.remove_images([0], dao) == 1
    assert not dao.has_image(uid)
    assert not target.exists()
    assert model.select() == 1


def test_remove_all(dao):
    model = ImageTableModel(dao.db)
    model.filter_by_studies(["s1", "s2"])
    assert model.remove_all(dao) == 3
    assert model.select() == 0
    assert not (dao.storage_dir / "dir_s2" / "i3.dcm").exists()


def test_directory_of(dao):
    model = ImageTableModel(dao.db)
    model.filter_by_studies(["s2"])
    assert model.directory_of([0], dao.storage_dir) == dao.storage_dir / "dir_s2"


def test_directory_of_requires_rows(dao):
    model = ImageTableModel(dao.db)
    model.filter_by_studies(["s2"])
    with pytest.raises(ValueError):
        model.directory_of([], dao.storage_dir)
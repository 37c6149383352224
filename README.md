# kissdicom

The non-graphical core of a small DICOM study viewer. It keeps a local
catalogue of studies and images in SQLite, copies imported image files into a
storage tree, offers table models over that catalogue, and provides a few
image pretreatment filters, a frame playback controller and a layout picker.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Purpose |
| --- | --- |
| `kissdicom.config` | Constants: application name, date and time formats, storage paths, database file name, private tag numbers. |
| `kissdicom.records` | `StudyRecord` and `ImageRecord` dataclasses describing a study and its images. |
| `kissdicom.utils` | `sex_to_display`, `display_to_sex`, `parse_dicom_date`, `parse_dicom_time`, `is_ip`, `local_ips`, `random_string`, file and directory helpers (`copy_file`, `copy_dir`, `make_dir`, `remove_dir`, `delete_path`, ...), `initial_dir`, and the `StationInfo` / `LocalSettings` pair stored in a small binary file. |
| `kissdicom.dbmanager` | `DbManager`, a lock-guarded SQLite layer usable as a context manager, with `SQLiteType` column types; failures raise `DatabaseError`. |
| `kissdicom.logdao` | `LogDao` keeps a log table and records entries of an `EventType`. |
| `kissdicom.studydao` | `StudyDao` creates the study and image tables and inserts, checks and removes studies and images, deleting stored image files along with their rows. |
| `kissdicom.importmodel` | `ImportStudyModel`, the studies waiting for import, merged by study UID, with `ImportColumn` cell values and headers. |
| `kissdicom.importer` | `ImportJob` copies the images of an import model into storage and records them; `study_dir_name` names a study's folder. |
| `kissdicom.studymodel` | `StudyTableModel` over the study table (newest first) with selection handling; `format_age` spells out DICOM age units. |
| `kissdicom.imagemodel` | `ImageTableModel` over the image table, filtered by study UIDs. |
| `kissdicom.filters` | Pretreatment filters on 8-bit numpy images: `sharpen`, `smooth`, `edge`, `emboss`, chosen by name with `get_pretreatment`. |
| `kissdicom.playback` | `PlaybackController`, the play / fast-forward / rewind state of a multi-frame image, driven by `tick()`. |
| `kissdicom.gridpicker` | `layout_at` and `highlighted_cells` for picking a columns-by-rows view layout. |

## Examples

Values read from DICOM headers:

```python
from kissdicom.utils import is_ip, parse_dicom_date, parse_dicom_time, sex_to_display

is_ip("192.168.1.10")          # True
is_ip("300.1.1.1")             # False
sex_to_display("F")            # "F"
parse_dicom_date("20210315")   # datetime.date(2021, 3, 15)
parse_dicom_time("101530")     # datetime.time(10, 15, 30)
```

A catalogue in a database file:

```python
from kissdicom.dbmanager import DbManager
from kissdicom.records import StudyRecord
from kissdicom.studydao import StudyDao

db = DbManager("catalogue.sqlite")
db.create_file()
dao = StudyDao(db, storage_dir="./DcmFile")
dao.initialize()
dao.insert_study(StudyRecord(study_uid="1.2.3", acc_number="A1"))
dao.has_study("1.2.3")   # True
```

A pretreatment filter chosen by name:

```python
import numpy as np
from kissdicom.filters import get_pretreatment, pretreatment_names

print(pretreatment_names())
apply = get_pretreatment("sharpen")
result = apply(np.zeros((64, 64, 4), dtype=np.uint8))
```

An unknown name, or `"none"`, gives a filter that returns the image unchanged.

Playback of a multi-frame image:

```python
from kissdicom.playback import Button, PlaybackController

player = PlaybackController()
player.update_time(0, 30)   # 30 frames, at the first one
player.press(Button.PLAY)
player.tick()               # advances one frame
player.stop()
```

## Storage layout

`ImportJob` copies images to
`<storage_dir>/<yyyyMM>/<yyyyMMddhhmmss>_<accession>/` under random
six-character file names (prefixed `XA_` for X-ray angiographic images).
`StudyDao` defaults to `./DcmFile` as its storage directory, and `DbManager`
to `KISS_DB.sqlite` in the working directory.

## What this package does not do

- It does not read DICOM files. `ImportStudyModel` and `ImportJob` work on
  `StudyRecord` objects that the caller fills in.
- It has no network services: no echo or store service, although
  `LocalSettings` keeps an AE title and store port.
- It does not export images to other formats and has no screens or windows;
  the table models and the playback controller hold state for a user
  interface to show.
- It installs no command.
"""Application-wide constants: names, default paths, formats and custom tags."""

from pathlib import Path

PROJECT_NAME = "Kiss Dicom Viewer"
PROJECT_VERSION = "0.0.0.0"

APP_DIR_NAME = ".KissDicomViewer"

OPEN_DIR_PATH = str(Path.home() / "Pictures")
OPEN_FILE_PATH = str(Path.home() / "Pictures")
DICOM_SAVE_PATH = "./DcmFile"
SCP_CACHE_PATH = "./ScpCache"
ETC_PATH = "./etc"
LOCALSETTINGS_CFG = "etc/localsettings.cfg"
STUDY_IMPORT_FOLDER = "STUDYIMPORTFOLDER"
STUDY_IMPORT_FILE = "STUDYIMPORTFILE"

MAGNIFIER_FACTOR = "MAGNIFIERFACTOR"
ANNO_TEXT_FONT = "ANNOTEXTFONT"
MAGNIFIER_SIZE = 256
IMAGE_LABEL_SIZE = 120
HIDE_NAME = False

# strftime/strptime equivalents of the DICOM and display formats.
DICOM_DATE_FORMAT = "%Y%m%d"
DICOM_TIME_FORMAT = "%H%M%S"
DICOM_DATETIME_FORMAT = "%Y%m%d%H%M%S"
NORMAL_DATE_FORMAT = "%Y-%m-%d"
NORMAL_TIME_FORMAT = "%H:%M:%S"
NORMAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

RAW_IMAGE_PREFIX = "RW"
PRESENT_IMAGE_PREFIX = "PR"
REPORT_PREFIX = "SR"

DB_CONNECTION_NAME = "KISS_DB"
DB_NAME = "KISS_DB.sqlite"

# Private DICOM tags, as (group, element).
DCM_AF_GROUP = 0x0021
DCM_AF_CURSOR_X = (DCM_AF_GROUP, 0x0001)
DCM_AF_CURSOR_Y = (DCM_AF_GROUP, 0x0002)
DCM_AF_PIXEL_VALUE = (DCM_AF_GROUP, 0x0003)
DCM_AF_ZOOM_FACTOR = (DCM_AF_GROUP, 0x0010)
DCM_AF_WINDOW_CENTER = (DCM_AF_GROUP, 0x0020)
DCM_AF_WINDOW_WIDTH = (DCM_AF_GROUP, 0x0021)

DEFAULT_AE_TITLE = "DRDCM"
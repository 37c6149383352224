"""Helpers shared across the application: text conversion, files and settings."""

from __future__ import annotations

import os
import random
import re
import shutil
import socket
import struct
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional, Union

from . import config

PathLike = Union[str, os.PathLike]

DEFAULT_CHARSET = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)

_IP_RE = re.compile(
    r"((2[0-4]\d|25[0-5]|[01]?\d\d?)\.){3}(2[0-4]\d|25[0-5]|[01]?\d\d?)"
)
_TIME_RE = re.compile(r"(\d{2})(\d{2})(\d{2})")
_TIME_MS_RE = re.compile(r"(\d{2})(\d{2})(\d{2})\.(\d{3})")
_DATE_RE = re.compile(r"(\d{4})(\d{2})(\d{2})")

_NULL_STRING = 0xFFFFFFFF


def sex_to_display(sex: str) -> str:
    """Map a stored patient sex to its display form: M, F or O."""
    upper = sex.upper()
    if "M" in upper:
        return "M"
    if "F" in upper:
        return "F"
    return "O"


def display_to_sex(text: str) -> str:
    """Map a displayed sex back to its stored form: M, F or O."""
    if text == "M":
        return "M"
    if text == "F":
        return "F"
    return "O"


def parse_dicom_time(text: str) -> Optional[time]:
    """Parse a DICOM TM value (hhmmss or hhmmss.zzz); None if invalid."""
    if "." in text:
        match = _TIME_MS_RE.fullmatch(text)
    else:
        match = _TIME_RE.fullmatch(text)
    if match is None:
        return None
    hour, minute, second = (int(g) for g in match.groups()[:3])
    millis = int(match.group(4)) if match.lastindex == 4 else 0
    try:
        return time(hour, minute, second, millis * 1000)
    except ValueError:
        return None


def parse_dicom_date(text: str) -> Optional[date]:
    """Parse a DICOM DA value (yyyyMMdd); None if invalid."""
    match = _DATE_RE.fullmatch(text)
    if match is None:
        return None
    try:
        return date(*(int(g) for g in match.groups()))
    except ValueError:
        return None


def is_ip(ip: str) -> bool:
    """Tell whether the text is a dotted IPv4 address."""
    return _IP_RE.fullmatch(ip) is not None


def local_ips() -> list[str]:
    """Return the IPv4 addresses of this host, loopback included."""
    found: list[str] = []
    for host in (socket.gethostname(), "localhost"):
        try:
            infos = socket.getaddrinfo(host, None, socket.AF_INET)
        except OSError:
            continue
        for info in infos:
            address = info[4][0]
            if is_ip(address) and address not in found:
                found.append(address)
    return found


def random_string(length: int = 6, charset: str = DEFAULT_CHARSET) -> str:
    """Return a random string of the given length drawn from charset."""
    if not charset:
        raise ValueError("charset must not be empty")
    return "".join(random.choices(charset, k=length))


def initial_dir(home: Optional[PathLike] = None) -> Path:
    """Create the application directory, make it current and set up its subfolders."""
    base = Path(home) if home is not None else Path.home()
    app_dir = base / config.APP_DIR_NAME
    if make_dir(app_dir):
        os.chdir(app_dir)
    make_dir(config.SCP_CACHE_PATH)
    make_dir(config.ETC_PATH)
    return Path.cwd()


def copy_file(src: PathLike, dst: PathLike, overwrite: bool = False) -> bool:
    """Copy a file; an existing destination is kept unless overwrite is set."""
    if not os.path.exists(src):
        return False
    if overwrite and os.path.exists(dst):
        os.remove(dst)
    if os.path.exists(dst):
        return False
    try:
        shutil.copyfile(src, dst)
    except OSError:
        return False
    return True


def file_exists(path: PathLike) -> bool:
    """Tell whether a file or directory exists at path."""
    return os.path.exists(path)


def copy_dir(src: PathLike, dst: PathLike) -> bool:
    """Copy a directory tree into dst without overwriting existing files."""
    source = Path(src)
    if not source.is_dir():
        return False
    target = Path(dst)
    make_dir(target)
    for entry in sorted(source.iterdir()):
        if entry.is_dir():
            copy_dir(entry, target / entry.name)
        elif entry.is_file():
            copy_file(entry, target / entry.name)
    return True


def dir_exists(path: PathLike) -> bool:
    """Tell whether a directory exists at path."""
    return os.path.isdir(path)


def make_dir(path: PathLike) -> bool:
    """Create a directory and its parents; True if it exists afterwards."""
    target = full_path(path)
    if os.path.isdir(target):
        return True
    try:
        os.makedirs(target)
    except OSError:
        return False
    return True


def remove_dir(path: PathLike) -> bool:
    """Remove a directory tree; a missing directory counts as removed."""
    if not os.fspath(path):
        raise ValueError("path must not be empty")
    if not os.path.exists(path):
        return True
    try:
        shutil.rmtree(path)
    except OSError:
        return False
    return True


def delete_path(path: PathLike) -> bool:
    """Delete a file or a directory tree; False if path is empty or missing."""
    if not os.fspath(path) or not os.path.exists(path):
        return False
    if os.path.isfile(path):
        os.remove(path)
    elif os.path.isdir(path):
        shutil.rmtree(path, ignore_errors=True)
    return True


def full_path(path: PathLike) -> str:
    """Return the absolute form of path."""
    return os.path.abspath(path)


@dataclass
class StationInfo:
    """This station's AE title and the port its store service listens on."""

    aetitle: str = ""
    store_port: int = 0

    def to_bytes(self) -> bytes:
        """Serialise as a length-prefixed UTF-16BE string and a 16-bit port."""
        text = self.aetitle.encode("utf-16-be")
        return (
            struct.pack(">I", len(text))
            + text
            + struct.pack(">H", self.store_port & 0xFFFF)
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "StationInfo":
        """Read a StationInfo written by to_bytes."""
        if len(data) < 4:
            raise ValueError("station info is truncated")
        (length,) = struct.unpack_from(">I", data, 0)
        offset = 4
        if length == _NULL_STRING:
            aetitle = ""
        else:
            if length % 2 or len(data) < offset + length:
                raise ValueError("station info has a malformed title")
            aetitle = data[offset:offset + length].decode("utf-16-be")
            offset += length
        if len(data) < offset + 2:
            raise ValueError("station info is truncated")
        (port,) = struct.unpack_from(">H", data, offset)
        return cls(aetitle=aetitle, store_port=port)


@dataclass
class LocalSettings:
    """Local station settings stored in a small binary file."""

    path: Path = field(default_factory=lambda: Path(config.LOCALSETTINGS_CFG))
    station: StationInfo = field(default_factory=StationInfo)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.load()

    def save(self) -> None:
        """Write the station info to the settings file."""
        self.path.write_bytes(self.station.to_bytes())

    def load(self) -> None:
        """Read the station info; a missing file leaves the values as they are."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return
        self.station = StationInfo.from_bytes(data)
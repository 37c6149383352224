import os
import string
import struct
from datetime import date, time
from pathlib import Path

import pytest

from kissdicom import config
from kissdicom.utils import (
    DEFAULT_CHARSET,
    LocalSettings,
    StationInfo,
    copy_dir,
    copy_file,
    delete_path,
    dir_exists,
    display_to_sex,
    file_exists,
    full_path,
    initial_dir,
    is_ip,
    local_ips,
    make_dir,
    parse_dicom_date,
    parse_dicom_time,
    random_string,
    remove_dir,
    sex_to_display,
)


@pytest.mark.parametrize(
    "raw, shown",
    [("M", "M"), ("m", "M"), ("F", "F"), ("f", "F"), ("", "O"), ("X", "O")],
)
def test_sex_to_display(raw, shown):
    assert sex_to_display(raw) == shown


@pytest.mark.parametrize("sex", ["M", "F", "O"])
def test_display_to_sex_round_trip(sex):
    assert display_to_sex(sex_to_display(sex)) == sex


def test_display_to_sex_unknown_is_other():
    assert display_to_sex("anything") == "O"


def test_parse_dicom_time_plain():
    assert parse_dicom_time("123456") == time(12, 34, 56)


def test_parse_dicom_time_with_millis():
    parsed = parse_dicom_time("123456.789")
    assert (parsed.hour, parsed.minute, parsed.second) == (12, 34, 56)
    assert parsed.microsecond == 789000


@pytest.mark.parametrize("text", ["", "12", "256000", "123456.1", "abcdef"])
def test_parse_dicom_time_invalid(text):
    assert parse_dicom_time(text) is None


def test_parse_dicom_date():
    assert parse_dicom_date("20200131") == date(2020, 1, 31)


@pytest.mark.parametrize("text", ["", "2020-01-31", "20201301", "20200230"])
def test_parse_dicom_date_invalid(text):
    assert parse_dicom_date(text) is None


@pytest.mark.parametrize("ip", ["127.0.0.1", "192.168.1.20", "255.255.255.255", "0.0.0.0"])
def test_is_ip_accepts(ip):
    assert is_ip(ip) is True


@pytest.mark.parametrize("ip", ["256.1.1.1", "1.2.3", "a.b.c.d", "1.2.3.4.5", ""])
def test_is_ip_rejects(ip):
    assert is_ip(ip) is False


def test_local_ips_are_ips():
    ips = local_ips()
    assert all(is_ip(ip) for ip in ips)
    assert len(ips) == len(set(ips))


def test_random_string_default_length_and_charset():
    value = random_string()
    assert len(value) == 6
    assert set(value) <= set(DEFAULT_CHARSET)


def test_random_string_custom_charset():
    value = random_string(40, "ab")
    assert len(value) == 40
    assert set(value) <= {"a", "b"}


def test_random_string_empty_charset():
    with pytest.raises(ValueError):
        random_string(3, "")


def test_copy_file_missing_source(tmp_path):
    assert copy_file(tmp_path / "none", tmp_path / "dst") is False
    assert not (tmp_path / "dst").exists()


def test_copy_file_keeps_existing_without_overwrite(tmp_path):
    src = tmp_path / "a.txt"
    dst = tmp_path / "b.txt"
    src.write_text("new")
    dst.write_text("old")
    assert copy_file(src, dst) is False
    assert dst.read_text() == "old"
    assert copy_file(src, dst, overwrite=True) is True
    assert dst.read_text() == "new"


def test_copy_dir_tree(tmp_path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "top.txt").write_text("top")
    (src / "sub" / "inner.txt").write_text("inner")
    dst = tmp_path / "dst"
    assert copy_dir(src, dst) is True
    assert (dst / "top.txt").read_text() == "top"
    assert (dst / "sub" / "inner.txt").read_text() == "inner"


def test_copy_dir_missing_source(tmp_path):
    assert copy_dir(tmp_path / "missing", tmp_path / "dst") is False


def test_make_dir_and_exists(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    assert dir_exists(target) is False
    assert make_dir(target) is True
    assert dir_exists(target) is True
    assert make_dir(target) is True
    assert file_exists(target) is True


def test_remove_dir(tmp_path):
    target = tmp_path / "x" / "y"
    target.mkdir(parents=True)
    (target / "f.txt").write_text("data")
    assert remove_dir(tmp_path / "x") is True
    assert not (tmp_path / "x").exists()


def test_remove_dir_empty_path():
    with pytest.raises(ValueError):
        remove_dir("")


def test_delete_path(tmp_path):
    file_path = tmp_path / "f.txt"
    file_path.write_text("data")
    folder = tmp_path / "folder"
    (folder / "inner").mkdir(parents=True)
    assert delete_path(file_path) is True
    assert not file_path.exists()
    assert delete_path(folder) is True
    assert not folder.exists()
    assert delete_path(folder) is False
    assert delete_path("") is False


def test_full_path_is_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = full_path("some/file.txt")
    assert os.path.isabs(result)
    assert Path(result) == tmp_path.resolve() / "some" / "file.txt" or Path(result) == tmp_path / "some" / "file.txt"


def test_initial_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = initial_dir(tmp_path)
    app_dir = tmp_path / config.APP_DIR_NAME
    assert Path(os.getcwd()).resolve() == app_dir.resolve()
    assert result.resolve() == app_dir.resolve()
    assert (app_dir / "ScpCache").is_dir()
    assert (app_dir / "etc").is_dir()


def test_station_info_wire_format():
    data = StationInfo("AE", 104).to_bytes()
    assert data == b"\x00\x00\x00\x04\x00A\x00E\x00\x68"


def test_station_info_round_trip():
    info = StationInfo("STORE_SCP", 11112)
    assert StationInfo.from_bytes(info.to_bytes()) == info


def test_station_info_null_title():
    data = struct.pack(">IH", 0xFFFFFFFF, 104)
    assert StationInfo.from_bytes(data) == StationInfo("", 104)


@pytest.mark.parametrize("data", [b"", b"\x00\x00", b"\x00\x00\x00\x04\x00A", b"\x00\x00\x00\x00\x01"])
def test_station_info_truncated(data):
    with pytest.raises(ValueError):
        StationInfo.from_bytes(data)


def test_local_settings_round_trip(tmp_path):
    cfg = tmp_path / "localsettings.cfg"
    settings = LocalSettings(cfg)
    assert settings.station == StationInfo()
    settings.station = StationInfo(string.ascii_uppercase[:8], 4242)
    settings.save()
    reloaded = LocalSettings(cfg)
    assert reloaded.station == settings.station


def test_local_settings_missing_file_keeps_defaults(tmp_path):
    settings = LocalSettings(tmp_path / "absent.cfg")
    settings.load()
    assert settings.station == StationInfo()
    assert not (tmp_path / "absent.cfg").exists()
import os

import pytest

from block_inventory import DeviceIOError, DeviceNotFoundError, DeviceType, ParseError, new_device
from block_inventory.device import device_name, discover_device_type

from conftest import create_device


@pytest.mark.parametrize("sectors", [0, 1, 2097152, 7814037168])
def test_size_is_sectors_times_512(sysfs_root, sectors):
    create_device(sysfs_root, "sda", size=f"{sectors}\n", markers=["device"])
    dev = new_device("sda", root=str(sysfs_root))
    assert dev.size == sectors * 512
    assert dev.size % 512 == 0


def test_size_without_trailing_newline(sysfs_root):
    create_device(sysfs_root, "sda", size="8")
    assert new_device("sda", root=str(sysfs_root)).size == 4096


@pytest.mark.parametrize("content", ["", "\n", "abc\n", "-1\n", "+12\n", " 12\n", "12\n\n", "0x10\n", "1.5\n"])
def test_malformed_size_raises_parse_error(sysfs_root, content):
    create_device(sysfs_root, "sda", size=content)
    with pytest.raises(ParseError) as ei:
        new_device("sda", root=str(sysfs_root))
    assert ei.value.raw == content


def test_non_ascii_size_raises_parse_error(sysfs_root):
    entry = create_device(sysfs_root, "sda")
    (entry / "size").write_bytes(b"\xff\xfe\n")
    with pytest.raises(ParseError) as ei:
        new_device("sda", root=str(sysfs_root))
    assert ei.value.raw == "\xff\xfe\n"


def test_size_overflowing_64_bits_raises_parse_error(sysfs_root):
    create_device(sysfs_root, "sda", size=f"{2 ** 64 // 512}\n")
    with pytest.raises(ParseError):
        new_device("sda", root=str(sysfs_root))


def test_missing_size_file_raises_io_error(sysfs_root):
    (sysfs_root / "sda").mkdir()
    with pytest.raises(DeviceIOError) as ei:
        new_device("sda", root=str(sysfs_root))
    assert ei.value.path == str(sysfs_root / "sda" / "size")
    assert isinstance(ei.value.__cause__, FileNotFoundError)


@pytest.mark.parametrize("markers,expected", [
    (["device"], DeviceType.DISK),
    (["md"], DeviceType.RAID),
    (["dm"], DeviceType.DEVICE_MAPPER),
    ([], DeviceType.UNKNOWN),
    (["md", "device"], DeviceType.RAID),
    (["dm", "device"], DeviceType.DEVICE_MAPPER),
    (["md", "dm"], DeviceType.RAID),
    (["md", "dm", "device"], DeviceType.RAID),
])
def test_classification_order(sysfs_root, markers, expected):
    create_device(sysfs_root, "xd0", markers=markers)
    assert new_device("xd0", root=str(sysfs_root)).type == expected


def test_marker_can_be_a_symlink(sysfs_root, tmp_path):
    target = tmp_path / "devices" / "pci0000:00"
    target.mkdir(parents=True)
    entry = create_device(sysfs_root, "sda")
    os.symlink(str(target), str(entry / "device"))
    assert new_device("sda", root=str(sysfs_root)).type == DeviceType.DISK


def test_dangling_marker_symlink_raises_io_error(sysfs_root, tmp_path):
    entry = create_device(sysfs_root, "md0", markers=["device"])
    os.symlink(str(tmp_path / "gone"), str(entry / "md"))
    with pytest.raises(DeviceIOError) as ei:
        new_device("md0", root=str(sysfs_root))
    assert ei.value.device == "md0"
    assert "failed to discover device type" in str(ei.value)


def test_marker_permission_error_is_not_absence(sysfs_root, monkeypatch):
    create_device(sysfs_root, "sda", markers=["device"])
    denied = str(sysfs_root / "sda" / "md")
    real_stat = os.stat

    def fake_stat(path, *args, **kwargs):
        if str(path) == denied:
            raise PermissionError(13, "Permission denied", path)
        return real_stat(path, *args, **kwargs)

    monkeypatch.setattr(os, "stat", fake_stat)
    with pytest.raises(DeviceIOError) as ei:
        discover_device_type(str(sysfs_root / "sda"))
    assert ei.value.path == denied
    assert isinstance(ei.value.__cause__, PermissionError)


@pytest.mark.parametrize("name", ["sdz", "/dev/sdz", "", "/", ".", "sd\x00a", "x" * 300])
def test_missing_device_raises_not_found(sysfs_root, name):
    create_device(sysfs_root, "sda")
    with pytest.raises(DeviceNotFoundError):
        new_device(name, root=str(sysfs_root))


@pytest.mark.parametrize("path", ["sda", "/dev/sda", "/dev/sda/", "foo/bar/sda"])
def test_prefix_is_stripped(sysfs_root, path):
    create_device(sysfs_root, "sda", size="10\n", markers=["device"])
    dev = new_device(path, root=str(sysfs_root))
    assert dev.name == "sda"
    assert dev.device_path == "/dev/sda"


def test_device_name():
    assert device_name("/dev/mapper/vg-root") == "vg-root"
    assert device_name("nvme0n1") == "nvme0n1"

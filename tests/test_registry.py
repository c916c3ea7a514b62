import os

import pytest

from block_inventory import (DeviceIOError, DeviceList, DeviceNotFoundError, DeviceRegistry,
                             DeviceType, ParseError, devices_from_paths, list_devices)

from conftest import create_device


@pytest.fixture
def registry(sysfs_root):
    create_device(sysfs_root, "sda", size="200\n", markers=["device"])
    create_device(sysfs_root, "md0", size="100\n", markers=["md", "device"])
    create_device(sysfs_root, "dm-1", size="50\n", markers=["dm"])
    create_device(sysfs_root, "loop0", size="0\n")
    return DeviceRegistry(root=str(sysfs_root))


def test_discover_all(registry, sysfs_root):
    devices = registry.discover_all()
    assert isinstance(devices, DeviceList)
    assert sorted(d.name for d in devices) == ["dm-1", "loop0", "md0", "sda"]

    # Listing order is whatever the directory returns
    assert [d.name for d in devices] == os.listdir(str(sysfs_root))

    by_name = {d.name: d for d in devices}
    assert by_name["sda"].type == DeviceType.DISK
    assert by_name["md0"].type == DeviceType.RAID
    assert by_name["dm-1"].type == DeviceType.DEVICE_MAPPER
    assert by_name["loop0"].type == DeviceType.UNKNOWN
    assert by_name["sda"].size == 200 * 512


def test_discover_all_empty_root(sysfs_root):
    assert DeviceRegistry(root=str(sysfs_root)).discover_all() == []


def test_discover_all_missing_root(tmp_path):
    root = tmp_path / "nope"
    with pytest.raises(DeviceIOError) as ei:
        DeviceRegistry(root=str(root)).discover_all()
    assert ei.value.path == str(root)
    assert isinstance(ei.value.__cause__, FileNotFoundError)


def test_discover_all_fails_on_single_bad_device(registry, sysfs_root):
    (sysfs_root / "sdb").mkdir()
    (sysfs_root / "sdb" / "size").write_text("garbage\n")
    with pytest.raises(ParseError) as ei:
        registry.discover_all()
    assert ei.value.device == "sdb"
    assert "failed to create device sdb" in str(ei.value)


def test_discover_from_names_keeps_order_and_duplicates(registry):
    devices = registry.discover_from_names(["/dev/md0", "sda", "md0"])
    assert [d.name for d in devices] == ["md0", "sda", "md0"]
    assert devices[0] == devices[2]


def test_discover_from_names_prefix_forms_resolve_to_same_device(registry):
    first, second = registry.discover_from_names(["/dev/sda", "sda"])
    assert first == second
    assert first.name == "sda"


def test_discover_from_names_fails_on_missing_name(registry):
    with pytest.raises(DeviceNotFoundError) as ei:
        registry.discover_from_names(["sda", "sdz", "md0"])
    assert ei.value.device == "sdz"
    assert str(ei.value).startswith("failed to create device sdz: ")


def test_discover_from_names_empty(registry):
    assert registry.discover_from_names([]) == []


def test_module_shortcuts_use_default_root(registry, sysfs_root, monkeypatch):
    monkeypatch.setattr("block_inventory.registry.SYSFS_BLOCK_ROOT", str(sysfs_root))

    assert sorted(d.name for d in list_devices()) == ["dm-1", "loop0", "md0", "sda"]

    devices = devices_from_paths(["/dev/dm-1", "sda"])
    assert isinstance(devices, DeviceList)
    assert [(d.name, d.type) for d in devices] == [("dm-1", DeviceType.DEVICE_MAPPER),
                                                  ("sda", DeviceType.DISK)]


def test_registry_defaults_to_sys_block():
    assert DeviceRegistry().root == "/sys/block"

"""Block device construction and type classification"""

import logging
import os

from .errors import BlockInventoryError, DeviceNotFoundError
from .models import Device, DeviceType
from .sysfs import SECTOR_SIZE_BYTES, SYSFS_BLOCK_ROOT, path_exists, read_sector_count

logger = logging.getLogger(__name__)

# Checked in order, the first marker present wins. RAID and device-mapper
# entries may also carry a "device" link on some kernels.
TYPE_MARKERS = (
    ("md", DeviceType.RAID),
    ("dm", DeviceType.DEVICE_MAPPER),
    ("device", DeviceType.DISK),
)


def device_name(device_path: str) -> str:
    """Get the base device name from a name or path

    Args:
        device_path: Bare name (sda) or path with any prefix (/dev/sda)

    Returns:
        str: Final path component
    """
    return os.path.basename(device_path.rstrip("/"))


def new_device(device_path: str, root: str = SYSFS_BLOCK_ROOT) -> Device:
    """Create a Device by inspecting its sysfs entry

    Args:
        device_path: Device name or path, only the base name is used
        root: Sysfs block root directory

    Returns:
        Device: Snapshot of the device

    Raises:
        DeviceNotFoundError: If the device has no sysfs entry
        DeviceIOError: If the entry or one of its markers cannot be read
        ParseError: If the size file holds unexpected content
    """
    name = device_name(device_path)
    sysfs_path = os.path.join(root, name)

    if name in ("", ".", "..") or "\0" in name or not path_exists(sysfs_path):
        raise DeviceNotFoundError(f"device {sysfs_path} does not exist", path=sysfs_path)

    # Size in sysfs is always reported in 512-byte sectors
    size = read_sector_count(os.path.join(sysfs_path, "size")) * SECTOR_SIZE_BYTES

    try:
        device_type = discover_device_type(sysfs_path)
    except BlockInventoryError as e:
        raise e.wrap(f"failed to discover device type for {sysfs_path}", device=name) from e

    logger.debug(f"Found device {name}: size={size}, type={device_type}")
    return Device(name=name, size=size, type=device_type)


def discover_device_type(sysfs_path: str) -> DeviceType:
    """Classify a device from the markers in its sysfs entry

    Args:
        sysfs_path: The device's sysfs entry (e.g., /sys/block/sda)

    Returns:
        DeviceType: First matching type, UNKNOWN if no marker exists

    Raises:
        DeviceIOError: If a marker's existence cannot be determined
    """
    for marker, device_type in TYPE_MARKERS:
        if path_exists(os.path.join(sysfs_path, marker)):
            return device_type
    return DeviceType.UNKNOWN


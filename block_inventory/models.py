"""Data models for block device inventory"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

DEV_ROOT = "/dev"


class DeviceType(Enum):
    """Origin of a block device as derived from its sysfs markers"""

    UNKNOWN = "unknown"
    DISK = "disk"
    RAID = "raid"
    DEVICE_MAPPER = "dm"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Device:
    """Snapshot of one block device taken from the sysfs block tree"""

    name: str                        # Base name (e.g., sda, md0, dm-1)
    size: int                        # Capacity in bytes, multiple of 512
    type: DeviceType = DeviceType.UNKNOWN

    @property
    def device_path(self) -> str:
        """Get the device node path (e.g., /dev/sda)"""
        return f"{DEV_ROOT}/{self.name}"

    def to_dict(self) -> dict:
        """Convert device to dictionary representation"""
        return {
            "name": self.name,
            "path": self.device_path,
            "size": self.size,
            "type": str(self.type)
        }


class DeviceList(list):
    """Ordered collection of devices produced by a discovery pass"""

    def __init__(self, devices: Iterable[Device] = ()):
        super().__init__(devices)

    def sorted_by_size(self, reverse: bool = False) -> "DeviceList":
        """Return a new list ordered by size

        Devices of equal size keep their relative order, also when
        ``reverse`` is set.

        Args:
            reverse: Order largest first instead of smallest first

        Returns:
            DeviceList: Sorted copy, the original is left untouched
        """
        if reverse:
            return DeviceList(sorted(self, key=lambda d: -d.size))
        return DeviceList(sorted(self, key=lambda d: d.size))

    def device_paths(self) -> List[str]:
        """Get the device node paths in list order"""
        return [device.device_path for device in self]

    def __str__(self) -> str:
        return " ".join(self.device_paths())


@dataclass
class Attributes:
    """Filesystem identification reported by blkid

    A field is None when blkid did not report the key.
    """

    uuid: Optional[str] = None
    fs_type: Optional[str] = None
    label: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert attributes to dictionary representation"""
        return {
            "uuid": self.uuid,
            "type": self.fs_type,
            "label": self.label
        }

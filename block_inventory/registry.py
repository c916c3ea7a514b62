"""Discovery of all block devices on the system"""

import logging
from typing import Iterable, Optional

from .device import new_device
from .errors import BlockInventoryError
from .models import DeviceList
from .sysfs import SYSFS_BLOCK_ROOT, list_device_names


class DeviceRegistry:
    """Discovers block devices by walking the sysfs block tree

    The registry keeps no state between calls; every call reads sysfs again.
    A failure on any single device fails the whole call.
    """

    def __init__(self, root: Optional[str] = None, logger: Optional[logging.Logger] = None):
        """Initialize the registry

        Args:
            root: Sysfs block root directory, /sys/block by default
            logger: Logger instance
        """
        self.root = root or SYSFS_BLOCK_ROOT
        self.logger = logger or logging.getLogger(__name__)

    def discover_all(self) -> DeviceList:
        """Discover every device listed under the sysfs block root

        Returns:
            DeviceList: Devices in directory listing order

        Raises:
            DeviceIOError: If the root cannot be listed
            BlockInventoryError: If any device cannot be created
        """
        self.logger.debug(f"Listing block devices in {self.root}")
        names = list_device_names(self.root)
        self.logger.debug(f"Found {len(names)} entries in {self.root}")
        return self.discover_from_names(names)

    def discover_from_names(self, names: Iterable[str]) -> DeviceList:
        """Create devices from names or paths

        Names can be bare ("sda") or carry any prefix ("/dev/sda"); only the
        base name is used. Duplicates are kept.

        Args:
            names: Device names or paths

        Returns:
            DeviceList: Devices in input order

        Raises:
            BlockInventoryError: If any device cannot be created, with the
                failing name added to the message
        """
        devices = DeviceList()
        for name in names:
            try:
                devices.append(new_device(name, root=self.root))
            except BlockInventoryError as e:
                raise e.wrap(f"failed to create device {name}", device=name) from e
        return devices


def list_devices() -> DeviceList:
    """Discover all block devices under /sys/block"""
    return DeviceRegistry().discover_all()


def devices_from_paths(paths: Iterable[str]) -> DeviceList:
    """Create devices from names or paths using /sys/block"""
    return DeviceRegistry().discover_from_names(paths)

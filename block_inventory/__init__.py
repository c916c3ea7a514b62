"""
Block Inventory

This module discovers block devices from the sysfs block tree, classifies
them as disk, RAID, device-mapper or unknown, and looks up their filesystem
attributes with blkid.
"""

from .blkid import BlkidProbe, parse_export_output
from .device import new_device
from .errors import (BlockInventoryError, DeviceIOError, DeviceNotFoundError,
                     ExternalToolError, ParseError)
from .models import Attributes, Device, DeviceList, DeviceType
from .registry import DeviceRegistry, devices_from_paths, list_devices

__version__ = "1.0.0"
__all__ = [
    "Attributes",
    "BlkidProbe",
    "BlockInventoryError",
    "Device",
    "DeviceIOError",
    "DeviceList",
    "DeviceNotFoundError",
    "DeviceRegistry",
    "DeviceType",
    "ExternalToolError",
    "ParseError",
    "devices_from_paths",
    "list_devices",
    "new_device",
    "parse_export_output",
]

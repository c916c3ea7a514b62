"""Exceptions raised by block device discovery"""

import copy
from typing import List, Optional


class BlockInventoryError(Exception):
    """Base class for all block inventory errors"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.device: Optional[str] = None

    def wrap(self, context: str, device: Optional[str] = None) -> "BlockInventoryError":
        """Return a copy of this error with context prepended to the message

        The copy keeps the original class so callers can still catch the
        specific error kind.

        Args:
            context: Text describing the failing operation
            device: Name of the device being processed, if any

        Returns:
            New error instance of the same class
        """
        wrapped = copy.copy(self)
        wrapped.message = f"{context}: {self.message}"
        wrapped.args = (wrapped.message,)
        if device is not None:
            wrapped.device = device
        return wrapped


class DeviceNotFoundError(BlockInventoryError):
    """A device has no entry in the sysfs block tree"""


class DeviceIOError(BlockInventoryError):
    """Reading or listing the sysfs block tree failed for a reason other than absence"""


class ParseError(BlockInventoryError):
    """Content was present but not in the expected shape"""

    def __init__(self, message: str, path: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message, path=path)
        self.raw = raw


class ExternalToolError(BlockInventoryError):
    """An external command could not be run or exited abnormally"""

    def __init__(self, message: str, path: Optional[str] = None,
                 command: Optional[List[str]] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message, path=path)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr

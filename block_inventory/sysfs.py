"""Read primitives for the sysfs block tree

All helpers are read-only. A path that disappears between two calls is
reported as a DeviceIOError by the caller that expected it to exist.
"""

import errno
import os
import re
from typing import List

from .errors import DeviceIOError, ParseError

SYSFS_BLOCK_ROOT = "/sys/block"
SECTOR_SIZE_BYTES = 512

_UINT64_MAX = 2 ** 64 - 1
_DECIMAL_RE = re.compile(r"[0-9]+")


def path_exists(path: str) -> bool:
    """Check whether a path exists, following symlinks

    Args:
        path: Path to check

    Returns:
        bool: True if the path exists, False if it does not

    Raises:
        DeviceIOError: If existence could not be determined (permission
            denied, I/O error, or a symlink whose target is gone)
    """
    try:
        os.stat(path)
        return True
    except FileNotFoundError:
        pass
    except ValueError:
        # Embedded NUL byte, no such path can exist
        return False
    except OSError as e:
        if e.errno == errno.ENAMETOOLONG:
            return False
        raise DeviceIOError(f"failed to stat {path}: {e}", path=path) from e

    # A dangling symlink means the target vanished underneath us
    if os.path.islink(path):
        raise DeviceIOError(f"dangling symlink {path}", path=path)
    return False


def read_sector_count(path: str) -> int:
    """Read a sector count from a sysfs size file

    The file holds a non-negative decimal integer, optionally followed by a
    single newline.

    Args:
        path: Path to the size file

    Returns:
        int: Number of 512-byte sectors

    Raises:
        DeviceIOError: If the file is missing or unreadable
        ParseError: If the content is not a decimal integer that fits 64 bits
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DeviceIOError(f"failed to read {path} for size: {e}", path=path) from e

    try:
        content = data.decode("ascii")
    except UnicodeDecodeError as e:
        raw = data.decode("latin-1")
        raise ParseError(f"failed to parse device size {raw!r} from {path}",
                         path=path, raw=raw) from e

    text = content[:-1] if content.endswith("\n") else content
    if not _DECIMAL_RE.fullmatch(text):
        raise ParseError(f"failed to parse device size {content!r} from {path}",
                         path=path, raw=content)

    sectors = int(text)
    if sectors * SECTOR_SIZE_BYTES > _UINT64_MAX:
        raise ParseError(f"device size {text} sectors from {path} overflows 64 bits",
                         path=path, raw=content)
    return sectors


def list_device_names(root: str = SYSFS_BLOCK_ROOT) -> List[str]:
    """List the device entries under the sysfs block root

    Names are returned in directory order, which is not sorted.

    Args:
        root: Sysfs block root directory

    Returns:
        List[str]: Device base names

    Raises:
        DeviceIOError: If the directory cannot be opened or read
    """
    try:
        with os.scandir(root) as entries:
            return [entry.name for entry in entries]
    except OSError as e:
        raise DeviceIOError(f"failed to read directory {root}: {e}", path=root) from e

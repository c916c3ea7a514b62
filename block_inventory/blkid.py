"""Filesystem attribute lookup using blkid"""

import logging
import subprocess
from typing import Iterable, List, Optional, Tuple, Union

from .errors import BlockInventoryError, ExternalToolError, ParseError
from .models import Attributes, Device

ATTRIBUTE_UUID_KEY = "UUID"
ATTRIBUTE_TYPE_KEY = "TYPE"
ATTRIBUTE_LABEL_KEY = "LABEL"

# blkid exits with 2 when it finds no recognizable signature on the device
BLKID_EXIT_NOT_FOUND = 2


def parse_export_output(output: str, device_path: Optional[str] = None) -> Attributes:
    """Parse ``blkid -o export`` output into Attributes

    Unknown keys are ignored. Keys that are not reported stay None.

    Args:
        output: KEY=VALUE lines as printed by blkid
        device_path: Device the output belongs to, used in error messages

    Returns:
        Attributes: Parsed attributes

    Raises:
        ParseError: If a non-empty line has no '=' separator
    """
    attrs = Attributes()
    for line in output.splitlines():
        if not line.strip():
            continue

        if "=" not in line:
            raise ParseError(f"malformed blkid output line for {device_path}: {line!r}",
                             path=device_path, raw=line)

        key, value = line.split("=", 1)
        if key == ATTRIBUTE_UUID_KEY:
            attrs.uuid = value
        elif key == ATTRIBUTE_TYPE_KEY:
            attrs.fs_type = value
        elif key == ATTRIBUTE_LABEL_KEY:
            attrs.label = value

    return attrs


class BlkidProbe:
    """Looks up filesystem attributes of block devices with blkid"""

    def __init__(self, command: str = "blkid", timeout: Optional[float] = None,
                 logger: Optional[logging.Logger] = None):
        """Initialize blkid probe

        Args:
            command: blkid executable name or path
            timeout: Seconds to wait for blkid, None to wait forever
            logger: Logger instance
        """
        self.command = command
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def lookup(self, device: Union[Device, str]) -> Attributes:
        """Get the filesystem attributes of a device

        Args:
            device: Device object or device node path (e.g., /dev/sda1)

        Returns:
            Attributes: Fresh attributes

        Raises:
            ExternalToolError: If blkid cannot be run or exits non-zero, including
                status 2 when it finds no signature on the device
            ParseError: If blkid output is malformed
        """
        device_path = device if isinstance(device, str) else device.device_path

        # `-o export` prints attributes as KEY=VALUE lines
        cmd = [self.command, "-o", "export", device_path]
        result = self._execute_command(cmd, device_path)

        if result.returncode != 0:
            raise ExternalToolError(
                f"blkid exited with status {result.returncode} for {device_path}: "
                f"{result.stderr.strip()}",
                path=device_path, command=cmd,
                returncode=result.returncode, stderr=result.stderr
            )

        if result.stderr:
            self.logger.warning(f"blkid {device_path}: {result.stderr.strip()}")

        return parse_export_output(result.stdout, device_path)

    def lookup_all(self, devices: Iterable[Device]) -> List[Tuple[Device, Attributes]]:
        """Get attributes for several devices, stopping at the first failure

        Args:
            devices: Devices to probe

        Returns:
            List of (device, attributes) pairs in input order
        """
        results = []
        for device in devices:
            try:
                results.append((device, self.lookup(device)))
            except BlockInventoryError as e:
                raise e.wrap(f"failed to get attributes of {device.name}", device=device.name) from e
        return results

    def _execute_command(self, cmd: List[str], device_path: str,
                         decode_method: str = 'utf-8') -> subprocess.CompletedProcess:
        """Run a command and capture its output

        Args:
            cmd: Command to execute as list of strings
            device_path: Device being probed, used in error messages
            decode_method: Method to decode command output

        Returns:
            subprocess.CompletedProcess: Finished process with decoded output, any exit status

        Raises:
            ExternalToolError: If the command cannot be started or times out
        """
        self.logger.debug(f"Executing command: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                    timeout=self.timeout, check=False)
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(f"blkid timed out after {self.timeout}s for {device_path}",
                                    path=device_path, command=cmd) from e
        except OSError as e:
            raise ExternalToolError(f"failed to exec {cmd[0]}: {e}",
                                    path=device_path, command=cmd) from e

        return subprocess.CompletedProcess(
            args=cmd, returncode=result.returncode,
            stdout=self._decode(result.stdout, decode_method),
            stderr=self._decode(result.stderr, decode_method)
        )

    def _decode(self, output_bytes: bytes, decode_method: str) -> str:
        """Decode command output, falling back to latin-1 for undecodable bytes"""
        try:
            return output_bytes.decode(decode_method)
        except UnicodeDecodeError:
            self.logger.debug(f"{decode_method} decoding failed, falling back to latin-1")
            return output_bytes.decode('latin-1')

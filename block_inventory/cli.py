"""Command line front end for block inventory"""

import argparse
import json
import logging
import sys
from typing import List, Optional, Dict

from .blkid import BLKID_EXIT_NOT_FOUND, BlkidProbe
from .config import ConfigManager, SORT_CHOICES
from .errors import BlockInventoryError, ExternalToolError
from .models import Attributes, Device, DeviceList
from .registry import DeviceRegistry


class BlockInventory:
    """Main class for the block inventory tool

    Lists block devices with their size and type, optionally with the
    filesystem attributes reported by blkid.
    """

    def __init__(self):
        """Initialize the BlockInventory instance"""
        # Options
        self.names: List[str] = []
        self.json_output = False
        self.show_attributes: Optional[bool] = None
        self.sort_by: Optional[str] = None
        self.paths_only = False
        self.config_file = "./block_inventory.conf"
        self.verbose = False
        self.quiet = False

        # Components (initialized later)
        self.logger = self._setup_logger()
        self.config_manager: Optional[ConfigManager] = None
        self.registry: Optional[DeviceRegistry] = None
        self.probe: Optional[BlkidProbe] = None

        # Data
        self.devices = DeviceList()
        self.attributes: Dict[str, Attributes] = {}

    def _setup_logger(self) -> logging.Logger:
        """Set up the logger for the application"""
        logger = logging.getLogger("block-inventory")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setLevel(logging.INFO)

            formatter = logging.Formatter('[%(levelname)s] %(message)s')
            ch.setFormatter(formatter)

            logger.addHandler(ch)

        return logger

    def parse_arguments(self, argv: Optional[List[str]] = None) -> None:
        """Parse command line arguments"""
        parser = argparse.ArgumentParser(
            description="Lists block devices found in sysfs with their size, type and filesystem attributes."
        )

        parser.add_argument("names", nargs="*", metavar="DEVICE",
                          help="Devices to inspect (e.g., sda or /dev/sda). Default: all devices")
        parser.add_argument("-j", "--json", action="store_true", help="Output results in JSON format")
        parser.add_argument("-a", "--attributes", action="store_true", default=None,
                          help="Include UUID, filesystem type and label reported by blkid")
        parser.add_argument("--sort", choices=SORT_CHOICES, default=None,
                          help="Order devices by size (default from config: size)")
        parser.add_argument("--paths", action="store_true",
                          help="Print device paths separated by spaces")
        parser.add_argument("-c", "--config", default=self.config_file, metavar="FILE",
                          help="Configuration file")
        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
        verbosity.add_argument("-q", "--quiet", action="store_true", help="Suppress INFO messages")

        args = parser.parse_args(argv)

        # Set instance variables
        self.names = args.names
        self.json_output = args.json
        self.show_attributes = args.attributes
        self.sort_by = args.sort
        self.paths_only = args.paths
        self.config_file = args.config
        self.verbose = args.verbose
        self.quiet = args.quiet

        # Configure logger
        if self.verbose:
            self._set_log_level(logging.DEBUG)
        elif self.quiet:
            self._set_log_level(logging.WARNING)

    def _set_log_level(self, level: int) -> None:
        """Apply a level to the logger and its handlers"""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point for the application

        Returns:
            int: Process exit status
        """
        self.parse_arguments(argv)

        # Load configuration, command line options take precedence
        self.config_manager = ConfigManager(self.config_file, logger=self.logger)
        if self.sort_by is None:
            self.sort_by = self.config_manager.output.sort
        if self.show_attributes is None:
            self.show_attributes = self.config_manager.output.attributes

        self.registry = DeviceRegistry(logger=self.logger)
        self.probe = BlkidProbe(
            command=self.config_manager.blkid.command,
            timeout=self.config_manager.blkid.timeout,
            logger=self.logger
        )

        try:
            self._collect()
        except BlockInventoryError as e:
            self.logger.error(str(e))
            return 1

        self._display_results()
        return 0

    def _collect(self) -> None:
        """Discover devices and look up their attributes if requested"""
        if self.names:
            self.logger.info(f"Inspecting {len(self.names)} devices...")
            devices = self.registry.discover_from_names(self.names)
        else:
            self.logger.info("Discovering block devices...")
            devices = self.registry.discover_all()

        if self.sort_by == "size":
            devices = devices.sorted_by_size()
        elif self.sort_by == "size-desc":
            devices = devices.sorted_by_size(reverse=True)
        self.devices = devices

        if self.show_attributes and not self.paths_only:
            self.logger.info("Looking up filesystem attributes...")
            self.attributes = {device.name: self._lookup_attributes(device) for device in self.devices}

    def _lookup_attributes(self, device: Device) -> Attributes:
        """Look up attributes of one device, empty if blkid finds no signature"""
        try:
            return self.probe.lookup(device)
        except ExternalToolError as e:
            if e.returncode == BLKID_EXIT_NOT_FOUND:
                self.logger.debug(f"No filesystem signature found on {device.device_path}")
                return Attributes()
            raise e.wrap(f"failed to get attributes of {device.name}", device=device.name) from e

    def _display_results(self) -> None:
        """Display device inventory results"""
        if self.paths_only:
            print(str(self.devices))
            return

        if self.json_output:
            print(json.dumps([self._device_dict(d) for d in self.devices], indent=2))
        else:
            self._display_table()

    def _device_dict(self, device: Device) -> dict:
        """Convert a device and its attributes to a dictionary"""
        data = device.to_dict()
        if self.show_attributes:
            data["attributes"] = self.attributes.get(device.name, Attributes()).to_dict()
        return data

    def _display_table(self) -> None:
        """Display devices in table format"""
        if not self.devices:
            print("No block devices found")
            return

        headers = ["Device", "Name", "Type", "Size"]
        if self.show_attributes:
            headers += ["UUID", "FSType", "Label"]

        table_data = []
        for device in self.devices:
            row = [
                device.device_path,
                device.name,
                str(device.type),
                self._format_size(device.size)
            ]
            if self.show_attributes:
                attrs = self.attributes.get(device.name, Attributes())
                row += [attrs.uuid or "-", attrs.fs_type or "-", attrs.label or "-"]
            table_data.append(row)

        self._print_table(headers, table_data)

    @staticmethod
    def _format_size(size_bytes: int) -> str:
        """Format a byte count for display"""
        if size_bytes >= 1000000000000:
            return f"{size_bytes / 1000000000000:.2f} TB"
        if size_bytes >= 1000000000:
            return f"{size_bytes / 1000000000:.2f} GB"
        if size_bytes >= 1000000:
            return f"{size_bytes / 1000000:.2f} MB"
        return f"{size_bytes} B"

    def _print_table(self, headers: List[str], data: List[List[str]]) -> None:
        """Print a formatted table"""
        # Calculate column widths
        widths = [len(h) for h in headers]
        for row in data:
            for i, val in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(val)))

        # Print header
        header_parts = [h.ljust(widths[i]) for i, h in enumerate(headers)]
        header_line = "  ".join(header_parts)
        print("-" * len(header_line))
        print(header_line)
        print("-" * len(header_line))

        # Print data
        for row in data:
            row_parts = [str(val).ljust(widths[i]) for i, val in enumerate(row)]
            print("  ".join(row_parts))

        print("-" * len(header_line))


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point"""
    sys.exit(BlockInventory().run(argv))

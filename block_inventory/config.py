"""Configuration management for block inventory"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
import yaml

SORT_CHOICES = ("size", "size-desc", "none")


@dataclass
class BlkidSettings:
    """Settings for the blkid attribute lookup"""

    command: str = "blkid"           # blkid executable name or path
    timeout: Optional[float] = None  # Seconds, None waits forever

    def to_dict(self) -> dict:
        """Convert settings to dictionary representation"""
        return {
            "command": self.command,
            "timeout": self.timeout
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BlkidSettings":
        """Create BlkidSettings from dictionary"""
        timeout = data.get("timeout")
        return cls(
            command=str(data.get("command", "blkid")),
            timeout=float(timeout) if timeout is not None else None
        )


@dataclass
class OutputSettings:
    """Default output options for the command line tool"""

    sort: str = "size"               # size, size-desc or none
    attributes: bool = False         # Include blkid attributes

    def to_dict(self) -> dict:
        """Convert settings to dictionary representation"""
        return {
            "sort": self.sort,
            "attributes": self.attributes
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OutputSettings":
        """Create OutputSettings from dictionary"""
        return cls(
            sort=str(data.get("sort", "size")),
            attributes=data.get("attributes", False)
        )


@dataclass
class Settings:
    """All configurable settings"""

    blkid: BlkidSettings = field(default_factory=BlkidSettings)
    output: OutputSettings = field(default_factory=OutputSettings)

    def to_dict(self) -> Dict[str, dict]:
        """Convert settings to dictionary representation"""
        return {
            "blkid": self.blkid.to_dict(),
            "output": self.output.to_dict()
        }


class ConfigManager:
    """Manages loading and accessing configuration from YAML file"""

    def __init__(self, config_file: str = "./block_inventory.conf", logger: Optional[logging.Logger] = None):
        """Initialize configuration manager

        Args:
            config_file: Path to configuration file
            logger: Logger instance
        """
        self.config_file = os.path.expanduser(config_file)
        self.logger = logger or logging.getLogger(__name__)

        self.settings = Settings()

        self.load()

    def load(self) -> None:
        """Load configuration from YAML file

        Configuration file structure:
        ```yaml
        blkid:
          command: blkid      # Identification tool executable
          timeout: 10         # Seconds to wait for blkid
        output:
          sort: size          # size, size-desc or none
          attributes: false   # Include blkid attributes by default
        ```
        """
        if not os.path.exists(self.config_file):
            self.logger.warning(f"Configuration file {self.config_file} not found. Using default settings.")
            return

        try:
            self.logger.info(f"Loading user configuration from {self.config_file}")

            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f)

            if not config:
                self.logger.warning(f"Configuration file {self.config_file} is empty or invalid")
                return

            if not isinstance(config, dict):
                self.logger.error(f"Configuration file {self.config_file} must contain a mapping")
                return

            if 'blkid' in config:
                self._load_blkid(config['blkid'])

            if 'output' in config:
                self._load_output(config['output'])

        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing YAML in configuration file: {e}")
        except IOError as e:
            self.logger.error(f"Error reading configuration file: {e}")

    def _load_blkid(self, blkid_data: Dict) -> None:
        """Load blkid settings from data

        Args:
            blkid_data: blkid settings dictionary
        """
        if not isinstance(blkid_data, dict):
            self.logger.warning("Skipping 'blkid' section, expected a mapping")
            return

        try:
            self.settings.blkid = BlkidSettings.from_dict(blkid_data)
            self.logger.debug(f"Loaded blkid settings: {self.settings.blkid}")
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Error loading blkid settings: {e}")

    def _load_output(self, output_data: Dict) -> None:
        """Load output settings from data

        Args:
            output_data: Output settings dictionary
        """
        if not isinstance(output_data, dict):
            self.logger.warning("Skipping 'output' section, expected a mapping")
            return

        output = OutputSettings.from_dict(output_data)
        if output.sort not in SORT_CHOICES:
            self.logger.warning(
                f"Invalid sort order '{output.sort}', expected one of {', '.join(SORT_CHOICES)}"
            )
            output.sort = OutputSettings.sort

        if not isinstance(output.attributes, bool):
            self.logger.warning(
                f"Invalid attributes value '{output.attributes}', expected true or false"
            )
            output.attributes = OutputSettings.attributes

        self.settings.output = output
        self.logger.debug(f"Loaded output settings: {self.settings.output}")

    @property
    def blkid(self) -> BlkidSettings:
        """Get blkid settings"""
        return self.settings.blkid

    @property
    def output(self) -> OutputSettings:
        """Get output settings"""
        return self.settings.output

"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: main.py, generate.py
- Purpose: Configuration loading and defaults management

BgpGen Configuration - Configuration Loading and Defaults Management

PURPOSE:
    Manages configuration loading from TOML files and provides defaults for
    output generation. Command line options override values read from file.

WHO READS ME:
    - main.py: Loads configuration via Config.load() during bootstrap
    - generate.py: output locations and the abstract addressing flag

WHO I READ:
    - None (leaf module, no internal dependencies)

DEPENDENCIES:
    - serde: TOML serialization/deserialization (@deserialize, @serialize)
    - serde.toml: from_toml(), to_toml()
    - dataclasses: @dataclass decorator
    - logging: Configuration loading status messages

CONFIG PARAMETERS:
    - abstract: emit symbolic placeholders instead of names/addresses (default: false)
    - output: output directory (default: output)
    - configs_dir: per-router config directory below output (default: configs)
    - topology_name: CORE save file name without suffix (default: core)
    - policy_file: policy name shown in diagnostics (default: empty)

FILE FORMAT:
    config.toml example:
    ```toml
    abstract = false
    output = "output"
    configs_dir = "configs"
    topology_name = "core"
    policy_file = "example.pro"
    ```
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from serde import deserialize, serialize, SerdeError
from serde.toml import from_toml, to_toml

_LOGGER = logging.getLogger(__name__)


@deserialize
@serialize
@dataclass
class Config:
    """bgp generator configuration"""

    abstract: bool = False
    output: str = "output"
    configs_dir: str = "configs"
    topology_name: str = "core"
    policy_file: str = ""

    @property
    def configs_path(self) -> Path:
        return Path(self.output) / self.configs_dir

    @property
    def topology_path(self) -> Path:
        return Path(self.output) / f"{self.topology_name}.imn"

    @classmethod
    def load(cls, filename: str) -> "Config":
        """load the configuration from the given file"""
        try:
            with open(filename, encoding="utf-8") as handle:
                cfg = from_toml(cls, handle.read())
            _LOGGER.info("Configuration loaded from file %s", filename)
        except (FileNotFoundError, TypeError, ValueError, SerdeError) as exc:
            if not isinstance(exc, FileNotFoundError):
                _LOGGER.error(exc)
            cfg = cls()
            _LOGGER.warning("using configuration defaults")
        return cfg

    def save(self, filename: str):
        """save the configuration to the given file"""
        with open(filename, "w+", encoding="utf-8") as handle:
            handle.write(to_toml(self))

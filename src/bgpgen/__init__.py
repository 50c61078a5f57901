"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: Python import system (when `import bgpgen` is executed), entry_points (CLI commands)
- Reads from: importlib.metadata (package metadata)

Purpose: Package initialization for BgpGen. Turns a compiled network-wide BGP
         policy into one Quagga configuration per router and a CORE emulator
         topology file.

Package Structure:
    - main.py: CLI entry point and argument parsing
    - generate.py: output pipeline (IR, router configs, topology)
    - quagga.py: per-router Quagga configuration rendering
    - addressing.py: concrete or symbolic names and addresses
    - topology.py: external routers, node ids, hosts and links
    - core.py: CORE save file rendering
    - config.py: Configuration management
    - models.py: Network configuration data model and errors
    - colorlog.py: Colored log output formatter and diagnostics
    - templates/: Jinja2 template for the CORE save file

Public API Exports:
    - Config: Configuration class
    - NetworkConfiguration: compiled network input
    - main(): CLI entry point
    - __version__, __description__: package metadata
"""

import importlib.metadata as importlib_metadata

from .config import Config
from .models import NetworkConfiguration
from .main import main

_metadata = importlib_metadata.metadata("bgpgen")
__version__ = _metadata["Version"]
__description__ = _metadata["Summary"]


__all__ = ["Config", "NetworkConfiguration", "main"]

"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: generate.py
- Purpose: CORE emulator save file (.imn) rendering

BgpGen CORE Renderer - Topology Save File for the CORE Network Emulator

PURPOSE:
    Renders a Topology (see topology.py) into the block grammar of a CORE
    save file: one `node` block per router and host, one `link` block per
    connection, followed by a fixed `canvas` and `option global` block.

    Routers run the zebra service; their Quagga configuration is embedded as
    a custom-config block together with the bootstrap metadata the zebra
    service needs (directories, boot script, start/stop commands).

WHO READS ME:
    - generate.py: render_core() for core.imn

WHO I READ:
    - topology.py: Topology, RouterNode, HostNode
    - templates/core.imn.jinja2

DEPENDENCIES:
    - jinja2: template rendering (Environment, PackageLoader)
"""

import logging
from dataclasses import dataclass

from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

from bgpgen.models import GeneratorError
from bgpgen.topology import Topology

_LOGGER = logging.getLogger(__name__)

J2SUFFIX = ".jinja2"
CORE_TEMPLATE = "core.imn"


@dataclass(frozen=True)
class ZebraService:
    """bootstrap metadata of the CORE zebra service"""

    config_dir: str = "/usr/local/etc/quagga"
    run_dir: str = "/var/run/quagga"
    config_file: str = "/usr/local/etc/quagga/Quagga.conf"
    boot_script: str = "quaggaboot.sh"
    start_index: int = 35


def tabindent(text: str, level: int = 1) -> str:
    """indent every non-empty line by `level` tabs, drops the final newline"""
    prefix = "\t" * level
    return "\n".join(prefix + line if line else line for line in text.splitlines())


def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("bgpgen"),
        autoescape=select_autoescape(default_for_string=False, default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["tabindent"] = tabindent
    return env


def render_core(topology: Topology, service: ZebraService | None = None) -> str:
    """renders the complete CORE save file"""
    try:
        template = get_environment().get_template(f"{CORE_TEMPLATE}{J2SUFFIX}")
    except TemplateNotFound as exc:
        raise GeneratorError(f"template does not exist: {CORE_TEMPLATE}") from exc
    _LOGGER.debug("rendering %s for %d routers", CORE_TEMPLATE, len(topology.routers))
    return template.render(topology=topology, service=service or ZebraService())

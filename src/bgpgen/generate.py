"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: main.py
- Purpose: Output orchestration, writes all generated artifacts

BgpGen Generate - Output Pipeline

PURPOSE:
    Runs the generation steps over a whole NetworkConfiguration and writes the
    results below the output directory:

        <output>/configs/configs.ir      intermediate representation (as given)
        <output>/configs/<router>.cfg    Quagga configuration per router
        <output>/core.imn                CORE emulator save file

FLOW:
    1. create the output directories
    2. write the intermediate representation
    3. render and write one config per configured (internal) router
    4. add placeholder routers for external peers (mutates the network)
    5. build the topology and write the CORE file

    Every file is written on its own, a failure leaves earlier files in place.

WHO READS ME:
    - main.py: generate()

WHO I READ:
    - config.py, models.py, quagga.py, topology.py, core.py

DEPENDENCIES:
    - enlighten: optional progress bar over the router configs
    - networkx: connectivity check of the final topology
    - pathlib: directory creation and file writes
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import enlighten
import networkx as nx

from bgpgen.config import Config
from bgpgen.core import render_core
from bgpgen.models import NetworkConfiguration
from bgpgen.quagga import render_quagga
from bgpgen.topology import add_fake_external_configs, build_topology, internal_routers

_LOGGER = logging.getLogger(__name__)

IR_NAME = "configs.ir"
CFG_SUFFIX = ".cfg"


@dataclass
class GenerateResult:
    """paths of everything written by generate()"""

    ir_path: Path
    topology_path: Path
    config_paths: dict[str, Path] = field(default_factory=dict)
    external_routers: list[str] = field(default_factory=list)


def write_file(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    _LOGGER.debug("wrote %s (%d bytes)", path, len(text))
    return path


def generate(
    network: NetworkConfiguration,
    cfg: Config,
    ir_text: str = "",
    progress: bool = False,
) -> GenerateResult:
    """write IR, per-router configs and the CORE topology. Note that the
    network is extended by the placeholder external routers."""
    started = time.perf_counter()
    configs_path = cfg.configs_path
    configs_path.mkdir(parents=True, exist_ok=True)

    ir_path = write_file(configs_path / IR_NAME, ir_text)
    result = GenerateResult(ir_path=ir_path, topology_path=cfg.topology_path)

    manager = None
    ticks = None
    if progress:
        manager = enlighten.get_manager()
        ticks = manager.counter(
            total=len(network),
            desc="configs",
            unit="routers",
            color="cyan",
            leave=False,
        )

    internal = internal_routers(network)
    for name, rc in network.routers.items():
        text = render_quagga(rc, internal, abstract=cfg.abstract)
        result.config_paths[name] = write_file(configs_path / f"{name}{CFG_SUFFIX}", text)
        _LOGGER.info("Config created for %s", name)
        if ticks is not None:
            ticks.update()

    if ticks is not None:
        ticks.close()  # type: ignore
    if manager is not None:
        manager.stop()  # type: ignore
    _LOGGER.info(
        "router configs done in %.1f ms", (time.perf_counter() - started) * 1000
    )

    result.external_routers = add_fake_external_configs(network)
    if result.external_routers:
        _LOGGER.warning(
            "Added %d external routers: %s",
            len(result.external_routers),
            ", ".join(result.external_routers),
        )

    topology = build_topology(network, internal, abstract=cfg.abstract)
    if topology.graph.number_of_nodes() and not nx.is_connected(topology.graph):
        _LOGGER.warning(
            "topology has %d disconnected parts",
            nx.number_connected_components(topology.graph),
        )
    write_file(result.topology_path, render_core(topology))
    _LOGGER.warning("Topology written to %s", result.topology_path)
    _LOGGER.info("generation done in %.1f ms", (time.perf_counter() - started) * 1000)
    return result

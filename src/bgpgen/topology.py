"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: generate.py, core.py
- Purpose: Emulator topology synthesis (external routers, node ids, hosts, links)

BgpGen Topology Builder - Nodes, Hosts and Links for the CORE Emulator

PURPOSE:
    Builds a self-consistent graph out of a NetworkConfiguration so that it can
    be written as a CORE save file:

    - every peer name that is not a configured router becomes a placeholder
      "external" router with its own configuration (add_fake_external_configs)
    - every router gets a node id 1..n in configuration order
    - every router with a declared network gets an attached host, the host ids
      continue the same counter after all router ids
    - router-host links and deduplicated router-router links

WHO READS ME:
    - generate.py: internal_routers(), add_fake_external_configs(), build_topology()
    - core.py: Topology, RouterNode, HostNode

WHO I READ:
    - models.py: configuration data model and errors
    - quagga.py: interface blocks and full daemon configuration

DEPENDENCIES:
    - networkx: router/host graph, link deduplication, connectivity check
    - re, ipaddress: concrete prefix parsing and range checks

HOST SUBNETS:
    network 10.0.0.0/24 -> router side 10.0.0.1/24, host side 10.0.0.2/24
    network a.b.c.d/32  -> both sides a.b.c.d/32
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from ipaddress import IPv4Interface
from types import MappingProxyType
from typing import Iterable, Mapping

import networkx as nx

from bgpgen.models import (
    MAX_ROUTER_ID,
    NetworkConfiguration,
    PeerConfig,
    RouterConfiguration,
    RouterIdError,
    UnsupportedPrefixError,
)
from bgpgen.quagga import render_interfaces, render_quagga

_LOGGER = logging.getLogger(__name__)

EXTERNAL_NETWORK = "172.0.0.0/24"

_CONCRETE_PREFIX = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})/(\d{1,2})$")


def internal_routers(nc: NetworkConfiguration) -> set[str]:
    """names of all routers configured before any synthesis"""
    return set(nc.routers)


def add_fake_external_configs(nc: NetworkConfiguration) -> list[str]:
    """add a placeholder router for every peer that is not configured itself.

    The placeholder has one session back to each internal router that peers
    with it, with source and peer address swapped, and a fixed network. Its
    router id is larger than every existing one. Returns the added names.
    """
    max_id = 0
    neighbors: dict[str, set[tuple[str, str, str]]] = defaultdict(set)
    for name, rc in nc.routers.items():
        max_id = max(max_id, rc.router_id)
        for pc in rc.peers:
            neighbors[pc.peer].add((name, pc.source_ip, pc.peer_ip))

    added: list[str] = []
    next_id = max_id
    for ex_peer in sorted(neighbors):
        if ex_peer in nc.routers:
            continue
        next_id += 1
        if next_id > MAX_ROUTER_ID:
            raise RouterIdError(ex_peer, next_id)
        peers = [
            PeerConfig(peer=name, peer_ip=src_ip, source_ip=peer_ip)
            for name, src_ip, peer_ip in sorted(neighbors[ex_peer])
        ]
        nc.routers[ex_peer] = RouterConfiguration(
            router_id=next_id,
            name=ex_peer,
            networks=[EXTERNAL_NETWORK],
            peers=peers,
        )
        added.append(ex_peer)
        _LOGGER.info("external router: %s (id %d, %d peers)", ex_peer, next_id, len(peers))
    return added


def assign_node_ids(names: Iterable[str], start: int = 1) -> tuple[Mapping[str, int], int]:
    """number the given names sequentially, returns the mapping and the next
    free id"""
    ids: dict[str, int] = {}
    next_id = start
    for name in names:
        ids[name] = next_id
        next_id += 1
    return MappingProxyType(ids), next_id


def host_subnets(router: str, network: str) -> tuple[str, str]:
    """split a router network into the (router side, host side) subnets"""
    if _CONCRETE_PREFIX.match(network) is None:
        raise UnsupportedPrefixError(router, network)
    try:
        prefix = IPv4Interface(network)
    except ValueError as exc:
        raise UnsupportedPrefixError(router, network) from exc
    a, b, c, d = prefix.ip.packed
    slash = prefix.network.prefixlen
    if slash == 32:
        return network, network
    if d + 2 > 255:
        raise UnsupportedPrefixError(router, network)
    return f"{a}.{b}.{c}.{d + 1}/{slash}", f"{a}.{b}.{c}.{d + 2}/{slash}"


@dataclass(frozen=True)
class HostNode:
    """a host attached to a router's first network"""

    name: str
    node_id: int
    router_id: int
    router_subnet: str
    host_subnet: str

    @property
    def hostname(self) -> str:
        return f"HOST_{self.name}"


def assign_hosts(
    nc: NetworkConfiguration, node_ids: Mapping[str, int], start: int
) -> tuple[Mapping[str, HostNode], int]:
    """derive one host per router with a declared network, continuing the
    node id counter at `start`"""
    hosts: dict[str, HostNode] = {}
    next_id = start
    for name, rc in nc.routers.items():
        if not rc.networks:
            continue
        router_subnet, host_subnet = host_subnets(name, rc.networks[0])
        hosts[name] = HostNode(
            name=name,
            node_id=next_id,
            router_id=node_ids[name],
            router_subnet=router_subnet,
            host_subnet=host_subnet,
        )
        next_id += 1
    return MappingProxyType(hosts), next_id


@dataclass
class RouterNode:
    """a router of the emulated topology"""

    name: str
    node_id: int
    interfaces: str
    config: str
    host_iface: int | None = None
    host_subnet: str | None = None
    peer_ifaces: list[tuple[int, int]] = field(default_factory=list)

    @property
    def hostname(self) -> str:
        return f"AS{self.name}"


@dataclass
class Topology:
    """everything needed to write the CORE file"""

    routers: list[RouterNode]
    hosts: list[HostNode]
    links: list[tuple[int, int]]
    graph: nx.Graph


def build_topology(
    nc: NetworkConfiguration, internal: set[str], abstract: bool = False
) -> Topology:
    """assign ids, derive hosts and links for the whole network"""
    node_ids, next_id = assign_node_ids(nc.routers)
    hosts, _ = assign_hosts(nc, node_ids, next_id)

    graph = nx.Graph()
    graph.add_nodes_from(node_ids.values(), kind="router")
    graph.add_nodes_from((host.node_id for host in hosts.values()), kind="host")

    routers: list[RouterNode] = []
    for name, rc in nc.routers.items():
        node = RouterNode(
            name=rc.name,
            node_id=node_ids[name],
            interfaces=render_interfaces(rc, abstract),
            config=render_quagga(rc, internal, abstract),
        )
        for index, pc in enumerate(rc.peers):
            if pc.peer in node_ids:
                node.peer_ifaces.append((index, node_ids[pc.peer]))
        host = hosts.get(name)
        if host is not None:
            node.host_iface = len(rc.peers)
            node.host_subnet = host.router_subnet
            node.peer_ifaces.append((node.host_iface, host.node_id))
        routers.append(node)

    links: list[tuple[int, int]] = []
    for host in hosts.values():
        graph.add_edge(host.router_id, host.node_id)
        links.append((host.router_id, host.node_id))
    for name, rc in nc.routers.items():
        for pc in rc.peers:
            if pc.peer not in node_ids:
                continue
            x, y = sorted((node_ids[name], node_ids[pc.peer]))
            if graph.has_edge(x, y):
                continue
            graph.add_edge(x, y)
            links.append((x, y))

    _LOGGER.info(
        "topology: %d routers, %d hosts, %d links",
        len(routers),
        len(hosts),
        len(links),
    )
    return Topology(
        routers=routers, hosts=list(hosts.values()), links=links, graph=graph
    )

"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: generate.py, core.py
- Purpose: Quagga bgpd/zebra configuration rendering for one router

BgpGen Quagga Renderer - Per-Router Daemon Configuration

PURPOSE:
    Turns a RouterConfiguration into the text of a Quagga configuration file.
    The file is made of sections in a fixed order; every section is followed
    by a "!" separator line, and an empty section contributes nothing at all.

SECTION ORDER:
    1. interface ethN blocks, one per peer, in peer order
    2. router bgp block (router-id, networks, neighbors, neighbor route-maps)
    3. ip prefix-list lines
    4. ip community-list lines
    5. ip as-path access-list lines
    6. route-map blocks, match clauses taken from the referenced policy list

ROUTER ID:
    The router-id always starts with 192, followed by the last three octets of
    the numeric router id. This keeps every generated router inside the address
    space used by the emulator.

WHO READS ME:
    - generate.py: writes configs/<router>.cfg
    - core.py: embeds the same text in the topology file

WHO I READ:
    - addressing.py: concrete or symbolic names and addresses
    - models.py: RouterConfiguration and friends

KEY EXPORTS:
    - SectionBuilder
    - render_interfaces(rc, abstract): interface blocks only
    - render_quagga(rc, internal, abstract): the full configuration
"""

import logging
from ipaddress import IPv4Address
from typing import Iterable

from bgpgen import addressing
from bgpgen.models import (
    MAX_ROUTER_ID,
    GeneratorError,
    PolicyList,
    RouteMap,
    RouterConfiguration,
    RouterIdError,
    string_of_kind,
)

_LOGGER = logging.getLogger(__name__)

SEPARATOR = "!"


class SectionBuilder:
    """collects configuration sections, each one closed by a separator line
    unless it is empty"""

    def __init__(self, separator: str = SEPARATOR):
        self.separator = separator
        self._lines: list[str] = []

    def section(self, lines: Iterable[str]) -> "SectionBuilder":
        """append a section; nothing is added for an empty one"""
        lines = list(lines)
        if lines:
            self._lines.extend(lines)
            self._lines.append(self.separator)
        return self

    def render(self) -> str:
        return "".join(f"{line}\n" for line in self._lines)


def lookup_policy_list(name: str, policy_lists: Iterable[PolicyList]) -> PolicyList:
    """find the policy list a route map refers to"""
    for pol in policy_lists:
        if pol.name == name:
            return pol
    raise GeneratorError(f"unknown policy list: {name}")


def router_id_line(rc: RouterConfiguration) -> str:
    if not 0 <= rc.router_id <= MAX_ROUTER_ID:
        raise RouterIdError(rc.name, rc.router_id)
    # the first octet is dropped on purpose and replaced by 192
    _, b, c, d = IPv4Address(rc.router_id).packed
    return f"  bgp router-id 192.{b}.{c}.{d}"


def interface_lines(rc: RouterConfiguration, index: int, abstract: bool) -> list[str]:
    pc = rc.peers[index]
    return [
        f"interface eth{index}",
        f" ip address {addressing.source_ip(rc, pc, abstract)}/24",
    ]


def bgp_lines(rc: RouterConfiguration, internal: set[str], abstract: bool) -> list[str]:
    lines = [
        f"router bgp {addressing.router_name(rc, abstract)}",
        "  no synchronization",
        router_id_line(rc),
    ]
    lines.extend(f"  network {network}" for network in rc.networks)
    for pc in rc.peers:
        ip = addressing.peer_ip(rc, pc, abstract)
        lines.append(f"  neighbor {ip} remote-as {pc.peer}")
        if pc.peer in internal:
            lines.append(f"  neighbor {ip} send-community both")
    for pc in rc.peers:
        ip = addressing.peer_ip(rc, pc, abstract)
        if pc.in_filter:
            lines.append(f"  neighbor {ip} route-map {pc.in_filter} in")
        if pc.out_filter:
            lines.append(f"  neighbor {ip} route-map {pc.out_filter} out")
    return lines


def route_map_lines(rc: RouterConfiguration, rm: RouteMap) -> list[str]:
    lines = [f"route-map {rm.name} permit {rm.priority}"]
    pol = lookup_policy_list(rm.policy_list, rc.policy_lists)
    lines.extend(f"  match community {name}" for name in pol.communities)
    lines.extend(f"  match ip address prefix-list {name}" for name in pol.prefix_lists)
    lines.extend(f"  match as-path {name}" for name in pol.as_path_lists)
    if rm.set_local_pref is not None:
        lines.append(f"  set local-preference {rm.set_local_pref}")
    if rm.delete_community is not None:
        lines.append(f"  set comm-list {rm.delete_community} delete")
    lines.extend(f"  set community additive {value}" for value in rm.set_community)
    return lines


def section_interfaces(
    builder: SectionBuilder, rc: RouterConfiguration, abstract: bool
) -> SectionBuilder:
    """add one interface section per peer, in peer order"""
    for index in range(len(rc.peers)):
        builder.section(interface_lines(rc, index, abstract))
    return builder


def render_interfaces(rc: RouterConfiguration, abstract: bool = False) -> str:
    """renders one interface block per peer"""
    return section_interfaces(SectionBuilder(), rc, abstract).render()


def render_quagga(
    rc: RouterConfiguration, internal: set[str], abstract: bool = False
) -> str:
    """renders the complete Quagga configuration of a router. Peers whose
    name is in `internal` get communities sent to them."""
    _LOGGER.debug("rendering quagga config for %s", rc.name)
    builder = section_interfaces(SectionBuilder(), rc, abstract)
    builder.section(bgp_lines(rc, internal, abstract))
    builder.section(
        f"ip prefix-list {pl.name} {string_of_kind(pl.kind)} {pl.prefix}"
        for pl in rc.prefix_lists
    )
    builder.section(
        " ".join(
            [f"ip community-list standard {cl.name} {string_of_kind(cl.kind)}", *cl.values]
        )
        for cl in rc.community_lists
    )
    builder.section(
        f"ip as-path access-list {al.name} {string_of_kind(al.kind)} {al.regex}"
        for al in rc.as_path_lists
    )
    for rm in rc.route_maps:
        builder.section(route_map_lines(rc, rm))
    return builder.render()

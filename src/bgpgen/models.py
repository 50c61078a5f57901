"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: quagga.py, topology.py, core.py, generate.py, main.py
- Purpose: Data model of a compiled, per-router BGP network configuration

BgpGen Data Models - Compiled Network Policy

PURPOSE:
    Defines the per-router configuration objects produced by the upstream
    policy compiler, plus the error classes raised by bgpgen. All models are
    pyserde dataclasses so a whole network can be loaded from JSON.

WHO READS ME:
    - quagga.py: renders one RouterConfiguration to Quagga syntax
    - topology.py: synthesizes external routers, assigns node ids
    - core.py: renders the CORE topology file
    - main.py: loads a NetworkConfiguration from JSON

WHO I READ:
    - None (leaf module, no internal dependencies)

DEPENDENCIES:
    - serde: JSON serialization/deserialization (@deserialize, @serialize)
    - dataclasses, enum

KEY EXPORTS:
    - GeneratorError, UnsupportedPrefixError, RouterIdError
    - Kind, PrefixList, CommunityList, AsPathList, PolicyList, RouteMap
    - PeerConfig, RouterConfiguration, NetworkConfiguration
"""

from dataclasses import dataclass, field
from enum import Enum

from serde import deserialize, serialize


class GeneratorError(Exception):
    """Base class for all errors raised by bgpgen"""


class UnsupportedPrefixError(GeneratorError):
    """a network prefix is not a concrete dotted-quad/length value"""

    kind = "unsupported prefix representation"

    def __init__(self, router: str, network: str):
        super().__init__(f"{self.kind}: router {router} declares network {network!r}")
        self.router = router
        self.network = network


MAX_ROUTER_ID = 0xFFFFFFFF


class RouterIdError(GeneratorError):
    """a router id does not fit into 32 bits"""

    kind = "router id out of range"

    def __init__(self, router: str, router_id: int):
        super().__init__(f"{self.kind}: router {router} has id {router_id}")
        self.router = router
        self.router_id = router_id


class Kind(Enum):
    """permit or deny, used by all match lists"""

    PERMIT = "permit"
    DENY = "deny"


def string_of_kind(kind: Kind) -> str:
    """render a list kind the way Quagga expects it"""
    if kind is Kind.PERMIT:
        return "permit"
    return "deny"


@deserialize
@serialize
@dataclass
class PrefixList:
    """ip prefix-list entry"""

    name: str
    kind: Kind
    prefix: str


@deserialize
@serialize
@dataclass
class CommunityList:
    """ip community-list entry, values are kept in order"""

    name: str
    kind: Kind
    values: list[str] = field(default_factory=list)


@deserialize
@serialize
@dataclass
class AsPathList:
    """ip as-path access-list entry, the name should be a number"""

    name: str
    kind: Kind
    regex: str


@deserialize
@serialize
@dataclass
class PolicyList:
    """named bundle of match clauses referenced by a route map"""

    name: str
    communities: list[str] = field(default_factory=list)
    prefix_lists: list[str] = field(default_factory=list)
    as_path_lists: list[str] = field(default_factory=list)


@deserialize
@serialize
@dataclass
class RouteMap:
    """a route map entry, always rendered as permit"""

    name: str
    priority: int
    policy_list: str
    set_local_pref: int | None = None
    delete_community: str | None = None
    set_community: list[str] = field(default_factory=list)


@deserialize
@serialize
@dataclass
class PeerConfig:
    """a BGP session as seen from the configured router"""

    peer: str
    peer_ip: str
    source_ip: str
    in_filter: str | None = None
    out_filter: str | None = None


@deserialize
@serialize
@dataclass
class RouterConfiguration:
    """fully resolved configuration of a single router"""

    router_id: int
    name: str
    networks: list[str] = field(default_factory=list)
    prefix_lists: list[PrefixList] = field(default_factory=list)
    community_lists: list[CommunityList] = field(default_factory=list)
    as_path_lists: list[AsPathList] = field(default_factory=list)
    route_maps: list[RouteMap] = field(default_factory=list)
    policy_lists: list[PolicyList] = field(default_factory=list)
    peers: list[PeerConfig] = field(default_factory=list)


@deserialize
@serialize
@dataclass
class NetworkConfiguration:
    """router name -> router configuration, iteration order is output order"""

    routers: dict[str, RouterConfiguration] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.routers

    def __len__(self) -> int:
        return len(self.routers)

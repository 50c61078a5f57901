import pytest

from bgpgen.models import (
    NetworkConfiguration,
    PeerConfig,
    RouterConfiguration,
    RouterIdError,
    UnsupportedPrefixError,
)
from bgpgen.topology import (
    EXTERNAL_NETWORK,
    add_fake_external_configs,
    assign_hosts,
    assign_node_ids,
    build_topology,
    host_subnets,
    internal_routers,
)


def build_network() -> NetworkConfiguration:
    return NetworkConfiguration(
        routers={
            "A": RouterConfiguration(
                router_id=10,
                name="A",
                networks=["10.0.0.0/24"],
                peers=[
                    PeerConfig("B", "10.0.1.2", "10.0.1.1"),
                    PeerConfig("X", "10.0.2.2", "10.0.2.1"),
                ],
            ),
            "B": RouterConfiguration(
                router_id=20,
                name="B",
                networks=["10.1.0.1/32"],
                peers=[
                    PeerConfig("A", "10.0.1.1", "10.0.1.2"),
                    PeerConfig("X", "10.0.3.2", "10.0.3.1"),
                    PeerConfig("W", "10.0.4.2", "10.0.4.1"),
                ],
            ),
        }
    )


def test_internal_routers():
    assert internal_routers(build_network()) == {"A", "B"}


def test_external_routers_are_added():
    nc = build_network()

    added = add_fake_external_configs(nc)

    assert added == ["W", "X"]
    assert list(nc.routers) == ["A", "B", "W", "X"]
    x = nc.routers["X"]
    assert x.networks == [EXTERNAL_NETWORK]
    assert x.route_maps == [] and x.policy_lists == []
    assert [(pc.peer, pc.source_ip, pc.peer_ip) for pc in x.peers] == [
        ("A", "10.0.2.2", "10.0.2.1"),
        ("B", "10.0.3.2", "10.0.3.1"),
    ]
    assert all(pc.in_filter is None and pc.out_filter is None for pc in x.peers)


def test_external_router_ids_are_unique_and_larger():
    nc = build_network()

    add_fake_external_configs(nc)

    assert nc.routers["W"].router_id == 21
    assert nc.routers["X"].router_id == 22


def test_external_synthesis_is_idempotent():
    nc = build_network()
    add_fake_external_configs(nc)

    assert add_fake_external_configs(nc) == []
    assert len(nc) == 4


def test_assign_node_ids_threads_counter():
    ids, next_id = assign_node_ids(["A", "B", "C"])

    assert dict(ids) == {"A": 1, "B": 2, "C": 3}
    assert next_id == 4
    with pytest.raises(TypeError):
        ids["D"] = 4  # type: ignore


def test_host_subnets():
    assert host_subnets("R", "10.0.0.0/24") == ("10.0.0.1/24", "10.0.0.2/24")
    assert host_subnets("R", "1.2.3.4/32") == ("1.2.3.4/32", "1.2.3.4/32")


def test_host_subnets_rejects_symbolic_prefix():
    with pytest.raises(UnsupportedPrefixError) as exc:
        host_subnets("R", "$net$")

    assert exc.value.kind == "unsupported prefix representation"
    assert exc.value.router == "R"


def test_hosts_follow_router_ids():
    nc = build_network()
    nc.routers["C"] = RouterConfiguration(router_id=30, name="C")
    nc.routers["D"] = RouterConfiguration(router_id=40, name="D", networks=["10.9.0.0/16"])
    ids, next_id = assign_node_ids(nc.routers)

    hosts, after = assign_hosts(nc, ids, next_id)

    assert [(h.name, h.node_id, h.router_id) for h in hosts.values()] == [
        ("A", 5, 1),
        ("B", 6, 2),
        ("D", 7, 4),
    ]
    assert after == 8
    assert hosts["D"].router_subnet == "10.9.0.1/16"
    assert hosts["D"].host_subnet == "10.9.0.2/16"


def test_build_topology_links():
    nc = build_network()
    internal = internal_routers(nc)
    add_fake_external_configs(nc)

    topology = build_topology(nc, internal)

    # A=1 B=2 W=3 X=4, hosts 5..8
    assert topology.links == [
        (1, 5),
        (2, 6),
        (3, 7),
        (4, 8),
        (1, 2),
        (1, 4),
        (2, 4),
        (2, 3),
    ]
    a = topology.routers[0]
    assert a.hostname == "ASA"
    assert a.peer_ifaces == [(0, 2), (1, 4), (2, 5)]
    assert a.host_iface == 2
    assert a.host_subnet == "10.0.0.1/24"
    assert topology.hosts[1].host_subnet == "10.1.0.1/32"
    assert topology.hosts[1].hostname == "HOST_B"


def test_build_topology_fails_on_symbolic_network():
    nc = NetworkConfiguration(
        routers={"R": RouterConfiguration(router_id=1, name="R", networks=["$pfx$"])}
    )

    with pytest.raises(UnsupportedPrefixError):
        build_topology(nc, {"R"})


def test_external_router_id_beyond_32_bits():
    nc = NetworkConfiguration(
        routers={
            "A": RouterConfiguration(
                router_id=0xFFFFFFFF,
                name="A",
                peers=[PeerConfig("X", "10.0.2.2", "10.0.2.1")],
            )
        }
    )

    with pytest.raises(RouterIdError) as exc:
        add_fake_external_configs(nc)

    assert exc.value.router == "X"
    assert "X" not in nc


@pytest.mark.parametrize(
    "network", ["300.0.0.0/24", "10.0.0.0/99", "10.0.0.254/24", "10.0.0.0"]
)
def test_host_subnets_rejects_out_of_range_prefix(network):
    with pytest.raises(UnsupportedPrefixError):
        host_subnets("R", network)

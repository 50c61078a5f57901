"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: quagga.py
- Purpose: Concrete or symbolic names and addresses for rendered configs

In abstract mode every router name and session address is replaced by a
placeholder that a later pass can substitute, e.g. ``R1.$router$`` or
``R1.R2.$peerIP$``. Otherwise the stored value is returned unchanged.
"""

from bgpgen.models import PeerConfig, RouterConfiguration


def router_name(rc: RouterConfiguration, abstract: bool) -> str:
    """name used on the 'router bgp' line"""
    if abstract:
        return f"{rc.name}.$router$"
    return rc.name


def peer_ip(rc: RouterConfiguration, pc: PeerConfig, abstract: bool) -> str:
    """address of the neighbor"""
    if abstract:
        return f"{rc.name}.{pc.peer}.$peerIP$"
    return pc.peer_ip


def source_ip(rc: RouterConfiguration, pc: PeerConfig, abstract: bool) -> str:
    """local address of the session, used on the interface"""
    if abstract:
        return f"{rc.name}.{pc.peer}.$sourceIP$"
    return pc.source_ip

"""Classification of IP literals as private or externally routable."""

import ipaddress
from typing import Iterable, List, Sequence

PRIVATE_CIDRS: Sequence[str] = (
    "127.0.0.0/8",
    "10.0.0.0/8",
    "172.16.0.0/12",
    "192.168.0.0/16",
    "100.64.0.0/10",  # carrier-grade NAT
)


def parse_networks(cidrs: Iterable[str]) -> List[ipaddress.IPv4Network]:
    return [ipaddress.ip_network(cidr, strict=False) for cidr in cidrs]


def is_private(ip: str, networks: Sequence[ipaddress.IPv4Network]) -> bool:
    """
    True if ip falls in one of networks.
    Raises ValueError for literals that are not IP addresses.
    """
    addr = ipaddress.ip_address(ip.strip())
    if addr.version == 6 and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    return any(addr in net for net in networks)


def has_external_ip(ips: Iterable[str], cidrs: Sequence[str] = PRIVATE_CIDRS) -> bool:
    """True if at least one parseable literal lies outside every private block."""
    networks = parse_networks(cidrs)
    for ip in ips:
        try:
            if not is_private(ip, networks):
                return True
        except ValueError:
            continue
    return False

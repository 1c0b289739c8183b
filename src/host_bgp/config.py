"""Configuration data structures for the host BGP generator.

These dataclasses describe a single run of the tool: the local ASN and the
ordered list of VPC subnets attached to the host.  Instances are produced by
:mod:`host_bgp.parser` and consumed read-only by the provisioner and the FRR
renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence, Tuple


DEFAULT_ASN = 64999
MAX_ASN = 4294967295
MAX_VLAN = 4095
MAX_IFNAME_LEN = 15

DEFAULT_OUTPUT_FILE = Path("/etc/frr/frr.conf")


def vlan_ifname(interface: str, vlan: int) -> str:
    """Return the kernel device name used for ``interface`` on ``vlan``.

    VLAN 0 means untagged, in which case the parent interface is used as-is.
    """

    if vlan == 0:
        return interface
    return f"{interface}.{vlan}"


@dataclass(frozen=True)
class SubnetSpec:
    """A VPC subnet attachment.

    Attributes
    ----------
    name:
        Subnet name, reused as the route-map and prefix-list name in FRR.
    vlan:
        VLAN id in ``0..4095``; ``0`` attaches to the untagged interface.
    interfaces:
        Parent interfaces in argument order.  Duplicates are kept.
    addresses:
        ``/32`` VIPs announced for this subnet in argument order.
    """

    name: str
    vlan: int
    interfaces: Tuple[str, ...]
    addresses: Tuple[str, ...]

    def interface_names(self) -> Iterator[str]:
        """Yield the neighbour interface name for every parent interface."""

        for interface in self.interfaces:
            yield vlan_ifname(interface, self.vlan)


@dataclass(frozen=True)
class RunConfig:
    """Everything needed to provision links and render ``frr.conf``."""

    asn: int
    subnets: Sequence[SubnetSpec]

    def all_addresses(self) -> Iterator[str]:
        for subnet in self.subnets:
            yield from subnet.addresses

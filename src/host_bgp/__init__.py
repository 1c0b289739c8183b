"""Host BGP configuration generator.

This package turns a declarative list of per-VPC subnet attachments into an
FRR configuration for a host running ``bgpd`` and makes sure the VLAN
sub-interfaces those attachments reference exist in the kernel.

The work is split in three steps:

* parsing and validating the ``<name>:v=<vlan>:i=<iface>:a=<addr>`` tokens
  into an immutable :class:`host_bgp.config.RunConfig`;
* provisioning ``<iface>.<vlan>`` links over netlink; and
* rendering the route-maps, loopback VIPs, unnumbered neighbours and network
  statements into a single ``frr.conf``.

Parsing and rendering are pure-Python so unit tests can run in CI without
root privileges or FRR binaries.
"""

from .config import RunConfig, SubnetSpec  # noqa: F401
from .parser import SpecError, UsageError, parse_run_config  # noqa: F401

__all__ = [
    "RunConfig",
    "SpecError",
    "SubnetSpec",
    "UsageError",
    "parse_run_config",
]

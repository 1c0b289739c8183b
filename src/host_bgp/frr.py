"""FRR configuration rendering for host BGP attachments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .config import DEFAULT_OUTPUT_FILE, RunConfig, SubnetSpec

LOG = logging.getLogger(__name__)


BGP_GLOBALS = (
    " no bgp ebgp-requires-policy",
    " bgp bestpath as-path multipath-relax",
    " timers bgp 3 9",
)

MAXIMUM_PATHS = 4


@dataclass
class RenderResult:
    """Result of an FRR rendering operation."""

    config_text: str
    output_path: Path


class FRRConfigRenderer:
    """Render ``frr.conf`` for a set of VPC subnet attachments.

    The document has four sections in a fixed order: per-subnet route-maps
    and prefix-lists, the loopback VIPs, the ``router bgp`` block with one
    unnumbered neighbour per attachment, and the ipv4 unicast network
    statements.  Subnets, interfaces and addresses keep argument order so
    identical input always yields byte-identical output.
    """

    def __init__(self, output_file: Path = DEFAULT_OUTPUT_FILE) -> None:
        self._output_file = Path(output_file)

    def build(self, run_config: RunConfig) -> str:
        lines: List[str] = []
        for subnet in run_config.subnets:
            lines.extend(self._render_policy(subnet))
        lines.append("!")

        lines.append("interface lo")
        lines.extend(f" ip address {addr}" for addr in run_config.all_addresses())
        lines.append("!")

        lines.append(f"router bgp {run_config.asn}")
        lines.extend(BGP_GLOBALS)
        for subnet in run_config.subnets:
            lines.extend(self._render_neighbors(subnet))
        lines.append(" address-family ipv4 unicast")
        lines.append(f"  maximum-paths {MAXIMUM_PATHS}")
        lines.extend(f"  network {addr}" for addr in run_config.all_addresses())
        lines.append(" !")
        lines.append("!")

        return "\n".join(lines) + "\n"

    def render(self, run_config: RunConfig) -> RenderResult:
        """Build the configuration and overwrite the output file with it.

        The write is a plain truncate-and-write; a daemon reloading at the
        same moment may observe a partial file.
        """

        body = self.build(run_config)

        self._output_file.parent.mkdir(parents=True, exist_ok=True)
        self._output_file.write_text(body, encoding="ascii")
        LOG.info(
            "Rendered FRR config for %d subnet(s) to %s",
            len(run_config.subnets),
            self._output_file,
        )

        return RenderResult(config_text=body, output_path=self._output_file)

    def _render_policy(self, subnet: SubnetSpec) -> List[str]:
        lines = [
            f"route-map {subnet.name} permit 10",
            f" match ip address prefix-list {subnet.name}",
            "!",
        ]
        lines.extend(
            f"ip prefix-list {subnet.name} permit {addr}" for addr in subnet.addresses
        )
        lines.append("!")
        return lines

    def _render_neighbors(self, subnet: SubnetSpec) -> List[str]:
        lines = []
        for ifname in subnet.interface_names():
            lines.append(f" neighbor {ifname} interface remote-as external")
            lines.append(f" neighbor {ifname} capability link-local")
            lines.append(f" neighbor {ifname} route-map {subnet.name} out")
        return lines

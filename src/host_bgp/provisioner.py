"""Kernel VLAN sub-interface provisioning over netlink."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import pyroute2
from pyroute2.netlink.exceptions import NetlinkError

from .config import RunConfig, vlan_ifname

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionWarning:
    """A sub-interface that could not be created.

    These never abort the run; the rendered config still references
    ``ifname`` and ``bgpd`` comes up without that session.
    """

    interface: str
    vlan: int
    ifname: str
    reason: str

    def __str__(self) -> str:
        return f"could not create vlan interface {self.ifname}: {self.reason}"


@dataclass
class ProvisionReport:
    """Outcome of a provisioning pass."""

    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)
    warnings: List[ProvisionWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


class InterfaceProvisioner:
    """Ensure ``<iface>.<vlan>`` links exist for every tagged attachment.

    Parameters
    ----------
    ipr_factory:
        Callable returning an ``IPRoute``-like context manager.  Tests pass a
        fake so no netlink socket is opened.
    """

    def __init__(
        self, ipr_factory: Optional[Callable[[], pyroute2.IPRoute]] = None
    ) -> None:
        self._ipr_factory = ipr_factory or pyroute2.IPRoute

    def provision(self, run_config: RunConfig) -> ProvisionReport:
        report = ProvisionReport()
        # Duplicate attachments map to the same link; try each link once.
        pending = list(
            dict.fromkeys(
                (interface, subnet.vlan)
                for subnet in run_config.subnets
                if subnet.vlan
                for interface in subnet.interfaces
            )
        )
        if not pending:
            LOG.debug("No tagged attachments, nothing to provision")
            return report

        try:
            ipr = self._ipr_factory()
        except (NetlinkError, OSError) as exc:
            for interface, vlan in pending:
                self._warn(report, interface, vlan, f"netlink unavailable: {exc}")
            return report

        with ipr:
            for interface, vlan in pending:
                self._ensure_vlan(ipr, report, interface, vlan)
        return report

    def _ensure_vlan(
        self, ipr, report: ProvisionReport, interface: str, vlan: int
    ) -> None:
        ifname = vlan_ifname(interface, vlan)
        try:
            if ipr.link_lookup(ifname=ifname):
                LOG.debug("VLAN interface '%s' already exists", ifname)
                report.existing.append(ifname)
                return

            parent = ipr.link_lookup(ifname=interface)
            if not parent:
                self._warn(
                    report, interface, vlan, f"parent interface {interface} not found"
                )
                return

            LOG.info("Creating VLAN interface '%s' (id %s on %s)", ifname, vlan, interface)
            ipr.link(
                "add",
                ifname=ifname,
                kind="vlan",
                link=parent[0],
                vlan_id=vlan,
            )
        except (NetlinkError, OSError) as exc:
            self._warn(report, interface, vlan, str(exc))
            return

        report.created.append(ifname)

    @staticmethod
    def _warn(
        report: ProvisionReport, interface: str, vlan: int, reason: str
    ) -> None:
        warning = ProvisionWarning(
            interface=interface,
            vlan=vlan,
            ifname=vlan_ifname(interface, vlan),
            reason=reason,
        )
        LOG.debug("%s", warning)
        report.warnings.append(warning)

"""Entry point for the host BGP configuration generator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from host_bgp.frr import FRRConfigRenderer
from host_bgp.parser import USAGE, SpecError, UsageError, parse_run_config
from host_bgp.provisioner import InterfaceProvisioner

from .config import DEFAULT_CONFIG_PATH, ToolConfig, load_config

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


class _ArgumentParser(argparse.ArgumentParser):
    """Report argument errors as usage errors instead of exiting with 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{USAGE}\nerror: {message}")


def _build_parser() -> argparse.ArgumentParser:
    # Subnet tokens are taken from the unrecognised arguments so names
    # starting with '-' are not mistaken for options.
    parser = _ArgumentParser(
        description="Render frr.conf for host VPC subnet attachments",
        usage=USAGE.splitlines()[0][len("Usage: "):],
        epilog="Positional arguments: an optional ASN followed by "
        "<name>:v=<vlan>:i=<iface>:a=<addr/32> tokens",
        add_help=False,
        allow_abbrev=False,
    )
    # Long form only; '-h' would swallow subnet names such as '-hv1:...'.
    parser.add_argument(
        "--help",
        action="help",
        help="Show this help message and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the tool configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Override the FRR configuration file to write",
    )
    parser.add_argument(
        "--no-provision",
        action="store_true",
        help="Do not create VLAN sub-interfaces",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _load_tool_config(path: Path | None) -> ToolConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ToolConfig()
        path = DEFAULT_CONFIG_PATH
    return load_config(path)


def main(argv: list[str] | None = None) -> int:
    try:
        args, specs = _build_parser().parse_known_args(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    _setup_logging(args.verbose)

    try:
        tool_config = _load_tool_config(args.config)
    except (OSError, ValueError, TypeError) as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    try:
        run_config = parse_run_config(specs, default_asn=tool_config.default_asn)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    except SpecError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if tool_config.provision and not args.no_provision:
        report = InterfaceProvisioner().provision(run_config)
        for warning in report.warnings:
            LOG.warning("%s", warning)
        LOG.debug(
            "Provisioning done: %d created, %d existing",
            len(report.created),
            len(report.existing),
        )

    output_file = args.output or tool_config.output_file
    try:
        FRRConfigRenderer(output_file).render(run_config)
    except OSError as exc:
        print(f"error: could not write {output_file}: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

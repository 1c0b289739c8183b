"""YAML configuration loader for the host BGP tool."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from host_bgp.config import DEFAULT_ASN, DEFAULT_OUTPUT_FILE, MAX_ASN


DEFAULT_CONFIG_PATH = Path("/etc/host-bgp/config.yaml")


@dataclass
class ToolConfig:
    output_file: Path = DEFAULT_OUTPUT_FILE
    default_asn: int = DEFAULT_ASN
    provision: bool = True


def _parse_section(section: dict) -> ToolConfig:
    default_asn = section.get("default_asn", DEFAULT_ASN)
    if isinstance(default_asn, bool) or not isinstance(default_asn, int):
        raise ValueError("'default_asn' must be an integer")
    if not 1 <= default_asn <= MAX_ASN:
        raise ValueError(f"'default_asn' must be in 1..{MAX_ASN}, got {default_asn}")

    provision = section.get("provision", True)
    if not isinstance(provision, bool):
        raise ValueError("'provision' must be a boolean")

    return ToolConfig(
        output_file=Path(section.get("output_file", DEFAULT_OUTPUT_FILE)),
        default_asn=default_asn,
        provision=provision,
    )


def load_config(path: Path) -> ToolConfig:
    data = yaml.safe_load(path.read_text())
    if data is None:
        return ToolConfig()
    if not isinstance(data, dict):
        raise ValueError("Tool configuration must be a mapping")

    section = data.get("host_bgp", {})
    if not isinstance(section, dict):
        raise ValueError("'host_bgp' section must be a mapping")
    return _parse_section(section)

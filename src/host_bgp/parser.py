"""Parse and validate subnet attachment tokens.

Each token has the form ``<name>:<param>[:<param>...]`` where a parameter is
one of ``v=<vlan>``, ``i=<interface>`` or ``a=<address>``.  An optional ASN
may precede the tokens.  Parsing stops at the first invalid token; nothing is
provisioned or rendered unless the whole argument list validates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from .config import (
    DEFAULT_ASN,
    MAX_ASN,
    MAX_IFNAME_LEN,
    MAX_VLAN,
    RunConfig,
    SubnetSpec,
)


USAGE = """\
Usage: host-bgp-config [ASN] <VPC-SUBNET-NAME-1>:v=<VLAN>:i=<INTERFACE1>[:i=<INTERFACE2>...]:a=<ADDRESS1>[:a=<ADDRESS2>...] [<VPC-SUBNET-NAME-2>:...]
ASN will default to 64999 if not provided
Addresses should be IPv4 /32
VLAN 0 means untagged
At least one VPC subnet is required, and at least one interface, VLAN and address per VPC; parameters (v=, i=, a=) can appear in any order"""

_DIGITS_RE = re.compile(r"[0-9]+")
_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")
_IPV4_32_RE = re.compile(r"(?:[0-9]{1,3}\.){3}[0-9]{1,3}/32")


class UsageError(Exception):
    """Raised when no subnet specification was supplied."""

    def __init__(self, message: str = USAGE) -> None:
        super().__init__(message)


class SpecError(ValueError):
    """Raised for an invalid subnet token.  Aborts the whole run."""

    def __init__(self, message: str, token: Optional[str] = None) -> None:
        super().__init__(message)
        self.token = token


@dataclass(frozen=True)
class ParamSlots:
    """Accumulated parameters of a single token.

    ``vlan`` is a single slot overwritten by every ``v=`` fragment, while
    interfaces and addresses accumulate in order without de-duplication.
    """

    vlan: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    addresses: Tuple[str, ...] = ()


def _reduce_param(slots: ParamSlots, fragment: str) -> ParamSlots:
    key, sep, value = fragment.partition("=")
    if sep:
        if key == "v":
            return replace(slots, vlan=value)
        if key == "i":
            return replace(slots, interfaces=slots.interfaces + (value,))
        if key == "a":
            return replace(slots, addresses=slots.addresses + (value,))
    raise SpecError(f"Unknown parameter: {fragment}")


def fold_params(fragments: Iterable[str]) -> ParamSlots:
    slots = ParamSlots()
    for fragment in fragments:
        slots = _reduce_param(slots, fragment)
    return slots


# ----------------------------------------------------------------------
# Field validators
# ----------------------------------------------------------------------
def parse_asn(value: str) -> Optional[int]:
    """Return ``value`` as an ASN or ``None`` if it is not one."""

    if not _DIGITS_RE.fullmatch(value):
        return None
    asn = int(value)
    if 1 <= asn <= MAX_ASN:
        return asn
    return None


def valid_vlan(value: Optional[str]) -> bool:
    if not value or not _DIGITS_RE.fullmatch(value):
        return False
    return 0 <= int(value) <= MAX_VLAN


def valid_interface(value: str) -> bool:
    # Linux caps device names at IFNAMSIZ - 1 characters.
    return bool(_NAME_RE.fullmatch(value)) and len(value) <= MAX_IFNAME_LEN


def valid_ipv4_32(value: str) -> bool:
    if not _IPV4_32_RE.fullmatch(value):
        return False
    octets = value[: -len("/32")].split(".")
    return all(0 <= int(octet) <= 255 for octet in octets)


def valid_subnet_name(value: str) -> bool:
    return bool(_NAME_RE.fullmatch(value))


# ----------------------------------------------------------------------
# Token parsing
# ----------------------------------------------------------------------
def split_token(token: str) -> Tuple[str, Sequence[str]]:
    """Split ``token`` into its name and parameter fragments.

    A token without ``:`` is used whole as the parameter list, so a stray
    word is reported as an unknown parameter.  A single trailing ``:`` is
    ignored; empty fragments anywhere else are kept and rejected later.
    """

    name, sep, rest = token.partition(":")
    if not sep:
        rest = token
    fragments = rest.split(":")
    if fragments[-1] == "":
        fragments.pop()
    return name, fragments


def parse_subnet(
    token: str, seen: FrozenSet[str] = frozenset()
) -> Tuple[SubnetSpec, FrozenSet[str]]:
    """Parse one token into a :class:`SubnetSpec`.

    ``seen`` holds the subnet names accepted so far; the returned set has
    this token's name added to it.
    """

    name, fragments = split_token(token)
    try:
        slots = fold_params(fragments)
    except SpecError as exc:
        raise SpecError(str(exc), token=token) from None

    if not name:
        raise SpecError(f"Missing VPC subnet name in argument: {token}", token)
    if not valid_subnet_name(name):
        raise SpecError(
            f"Invalid VPC subnet name: {name} in argument: {token}", token
        )
    if name in seen:
        raise SpecError(f"Duplicate VPC subnet name detected: {name}", token)
    if not valid_vlan(slots.vlan):
        raise SpecError(f"Invalid or missing VLAN in argument: {token}", token)
    if not slots.interfaces:
        raise SpecError(
            f"At least one interface is required in argument: {token}", token
        )
    for interface in slots.interfaces:
        if not valid_interface(interface):
            raise SpecError(
                f"Invalid interface: {interface} in argument: {token}", token
            )
    if not slots.addresses:
        raise SpecError(
            f"At least one address is required in argument: {token}", token
        )
    for address in slots.addresses:
        if not valid_ipv4_32(address):
            raise SpecError(
                f"Invalid address: {address} in argument: {token} "
                "(hint: must be IPv4 /32)",
                token,
            )

    subnet = SubnetSpec(
        name=name,
        vlan=int(slots.vlan),
        interfaces=slots.interfaces,
        addresses=slots.addresses,
    )
    return subnet, seen | {name}


def parse_run_config(
    args: Sequence[str], default_asn: int = DEFAULT_ASN
) -> RunConfig:
    """Build a :class:`RunConfig` from the raw argument list.

    The first argument is consumed as the ASN only when it is a decimal
    number in ``1..4294967295``.  Anything else, including an out-of-range
    number, is parsed as the first subnet token.
    """

    remaining = list(args)
    asn = default_asn
    if remaining:
        leading = parse_asn(remaining[0])
        if leading is not None:
            asn = leading
            remaining = remaining[1:]

    if not remaining:
        raise UsageError()

    seen: FrozenSet[str] = frozenset()
    subnets = []
    for token in remaining:
        subnet, seen = parse_subnet(token, seen)
        subnets.append(subnet)

    return RunConfig(asn=asn, subnets=tuple(subnets))

import pytest
from pyroute2.netlink.exceptions import NetlinkError


class FakeIPRoute:
    """In-memory stand-in for ``pyroute2.IPRoute``."""

    def __init__(self, links=None, fail_add=False):
        self.links = dict(links or {})
        self.fail_add = fail_add
        self.added: list[dict] = []
        self.attempts: list[str] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def link_lookup(self, ifname):
        if ifname in self.links:
            return [self.links[ifname]]
        return []

    def link(self, command, **kwargs):
        assert command == "add"
        self.attempts.append(kwargs["ifname"])
        if self.fail_add:
            raise NetlinkError(1, "Operation not permitted")
        self.added.append(kwargs)
        self.links[kwargs["ifname"]] = max(self.links.values(), default=0) + 1


@pytest.fixture
def fake_ipr():
    return FakeIPRoute(links={"lo": 1, "eth0": 2, "eth1": 3, "eth2": 4})

from host_bgp.parser import parse_run_config
from host_bgp.provisioner import InterfaceProvisioner, ProvisionWarning


def test_creates_missing_vlan_interface(fake_ipr):
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(["vpc1:v=10:i=eth0:a=10.0.0.1/32"])

    report = provisioner.provision(cfg)

    assert report.ok
    assert report.created == ["eth0.10"]
    assert fake_ipr.added == [
        {"ifname": "eth0.10", "kind": "vlan", "link": 2, "vlan_id": 10}
    ]


def test_untagged_attachment_is_left_alone(fake_ipr):
    calls = []

    def factory():
        calls.append(1)
        return fake_ipr

    cfg = parse_run_config(["vpcA:v=0:i=eth1:i=eth2:a=10.1.1.1/32"])

    report = InterfaceProvisioner(ipr_factory=factory).provision(cfg)

    assert report.created == []
    assert report.warnings == []
    assert calls == []


def test_second_run_is_idempotent(fake_ipr):
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(
        ["vpc1:v=10:i=eth0:i=eth1:a=10.0.0.1/32", "vpc2:v=20:i=eth0:a=10.0.0.2/32"]
    )

    first = provisioner.provision(cfg)
    assert first.created == ["eth0.10", "eth1.10", "eth0.20"]

    fake_ipr.added.clear()
    second = provisioner.provision(cfg)

    assert fake_ipr.added == []
    assert second.created == []
    assert second.existing == ["eth0.10", "eth1.10", "eth0.20"]


def test_duplicate_interface_created_once(fake_ipr):
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(["vpc1:v=10:i=eth0:i=eth0:a=10.0.0.1/32"])

    report = provisioner.provision(cfg)

    assert report.created == ["eth0.10"]
    assert len(fake_ipr.added) == 1


def test_creation_failure_is_a_warning(fake_ipr):
    fake_ipr.fail_add = True
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(["vpc1:v=10:i=eth0:i=eth1:a=10.0.0.1/32"])

    report = provisioner.provision(cfg)

    assert not report.ok
    assert report.created == []
    assert [w.ifname for w in report.warnings] == ["eth0.10", "eth1.10"]
    assert "could not create vlan interface eth0.10" in str(report.warnings[0])


def test_missing_parent_is_a_warning(fake_ipr):
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(["vpc1:v=7:i=ens9:a=10.0.0.1/32"])

    report = provisioner.provision(cfg)

    assert report.warnings == [
        ProvisionWarning(
            interface="ens9",
            vlan=7,
            ifname="ens9.7",
            reason="parent interface ens9 not found",
        )
    ]
    assert fake_ipr.added == []


def test_netlink_unavailable_is_a_warning():
    def factory():
        raise PermissionError(1, "Operation not permitted")

    cfg = parse_run_config(["vpc1:v=10:i=eth0:a=10.0.0.1/32"])

    report = InterfaceProvisioner(ipr_factory=factory).provision(cfg)

    assert [w.ifname for w in report.warnings] == ["eth0.10"]
    assert report.warnings[0].reason.startswith("netlink unavailable")


def test_failed_duplicate_interface_attempted_once(fake_ipr):
    fake_ipr.fail_add = True
    provisioner = InterfaceProvisioner(ipr_factory=lambda: fake_ipr)
    cfg = parse_run_config(
        ["vpc1:v=10:i=eth0:i=eth0:a=10.0.0.1/32", "vpc2:v=10:i=eth0:a=10.0.0.2/32"]
    )

    report = provisioner.provision(cfg)

    assert fake_ipr.attempts == ["eth0.10"]
    assert [w.ifname for w in report.warnings] == ["eth0.10"]

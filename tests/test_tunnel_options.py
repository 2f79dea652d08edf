import pytest
from pydantic import ValidationError

from tunnelsettings import target
from tunnelsettings.enums import DnsState, TargetOs
from tunnelsettings.tunnel_options import TunnelOptions, WireguardTunnelOptions


@pytest.mark.parametrize("target_os", [TargetOs.ANDROID, TargetOs.IOS])
def test_ipv6_enabled_by_default_on_mobile(target_os: TargetOs) -> None:
    assert TunnelOptions.for_target_os(target_os).generic.enable_ipv6 is True


@pytest.mark.parametrize("target_os", [TargetOs.WINDOWS, TargetOs.LINUX, TargetOs.MACOS])
def test_ipv6_disabled_by_default_on_desktop(target_os: TargetOs) -> None:
    assert TunnelOptions.for_target_os(target_os).generic.enable_ipv6 is False


def test_plain_defaults_follow_target_os(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(target, "TARGET_OS", TargetOs.ANDROID)
    assert TunnelOptions().generic.enable_ipv6 is True

    monkeypatch.setattr(target, "TARGET_OS", TargetOs.LINUX)
    assert TunnelOptions().generic.enable_ipv6 is False


def test_defaults_of_protocol_blocks() -> None:
    options = TunnelOptions.for_target_os(TargetOs.LINUX)

    assert options.openvpn.mssfix is None
    assert options.wireguard.options.mtu is None
    assert options.wireguard.rotation_interval is None
    assert options.dns_options.state == DnsState.DEFAULT
    assert options.dns_options.custom_options.addresses == []


def test_partial_document_keeps_other_defaults() -> None:
    options = TunnelOptions.model_validate({"wireguard": {"rotation_interval": 48}})

    assert options.wireguard.rotation_interval == 48
    assert options.wireguard.options.mtu is None
    assert options.openvpn.mssfix is None


@pytest.mark.parametrize("hours", [0, 23, 721])
def test_rotation_interval_out_of_range_rejected(hours: int) -> None:
    with pytest.raises(ValidationError):
        WireguardTunnelOptions(rotation_interval=hours)


def test_custom_dns_addresses_are_parsed() -> None:
    options = TunnelOptions.model_validate(
        {"dns_options": {"state": "custom", "custom_options": {"addresses": ["10.64.0.1", "fc00::1"]}}}
    )

    assert options.dns_options.state == DnsState.CUSTOM
    assert [str(a) for a in options.dns_options.custom_options.addresses] == ["10.64.0.1", "fc00::1"]

from __future__ import annotations

from pydantic import BaseModel, Field

from tunnelsettings import target
from tunnelsettings.dns import DnsOptions
from tunnelsettings.enums import TargetOs

MIN_ROTATION_INTERVAL_HOURS = 24
MAX_ROTATION_INTERVAL_HOURS = 30 * 24


def _default_enable_ipv6() -> bool:
    return target.TARGET_OS.is_mobile


class OpenVpnTunnelOptions(BaseModel):
    mssfix: int | None = Field(default=None, ge=1000, le=1450)


class WireguardBaseOptions(BaseModel):
    mtu: int | None = Field(default=None, ge=1280, le=1420)


class WireguardTunnelOptions(BaseModel):
    options: WireguardBaseOptions = Field(default_factory=WireguardBaseOptions)
    # Key rotation interval in hours. None means the daemon default.
    rotation_interval: int | None = Field(
        default=None, ge=MIN_ROTATION_INTERVAL_HOURS, le=MAX_ROTATION_INTERVAL_HOURS
    )


class GenericTunnelOptions(BaseModel):
    enable_ipv6: bool = Field(default_factory=_default_enable_ipv6)


class TunnelOptions(BaseModel):
    """Options applied to every tunnel of a given type, wherever the relay is located."""

    openvpn: OpenVpnTunnelOptions = Field(default_factory=OpenVpnTunnelOptions)
    wireguard: WireguardTunnelOptions = Field(default_factory=WireguardTunnelOptions)
    generic: GenericTunnelOptions = Field(default_factory=GenericTunnelOptions)
    dns_options: DnsOptions = Field(default_factory=DnsOptions)

    @classmethod
    def for_target_os(cls, target_os: TargetOs) -> TunnelOptions:
        return cls(generic=GenericTunnelOptions(enable_ipv6=target_os.is_mobile))

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from tunnelsettings.enums import IpVersion, SelectedObfuscation, TransportProtocol, TunnelType

# A constraint is either the literal "any" or a concrete value.
AnyConstraint = Literal["any"]
ANY: AnyConstraint = "any"

Port = Annotated[int, Field(ge=1, le=65535)]


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class LocationConstraint(_Value):
    country: str = Field(min_length=2, max_length=2)
    city: str | None = None
    hostname: str | None = None

    def __str__(self) -> str:
        return "/".join(part for part in (self.country, self.city, self.hostname) if part)


class TransportPort(_Value):
    protocol: TransportProtocol
    port: Port | AnyConstraint = ANY


class OpenVpnConstraints(_Value):
    port: TransportPort | AnyConstraint = ANY


class WireguardConstraints(_Value):
    port: Port | AnyConstraint = ANY
    ip_version: IpVersion | AnyConstraint = ANY


class RelayConstraints(_Value):
    location: LocationConstraint | AnyConstraint = ANY
    providers: list[str] | AnyConstraint = ANY
    tunnel_protocol: TunnelType | AnyConstraint = ANY
    wireguard_constraints: WireguardConstraints = Field(default_factory=WireguardConstraints)
    openvpn_constraints: OpenVpnConstraints = Field(default_factory=OpenVpnConstraints)

    def merge(self, update: RelayConstraintsUpdate) -> RelayConstraints:
        changes = {name: value for name, value in update if value is not None}
        return self.model_copy(update=changes)


class RelayConstraintsUpdate(_Value):
    # None leaves the current constraint untouched; "any" clears it.
    location: LocationConstraint | AnyConstraint | None = None
    providers: list[str] | AnyConstraint | None = None
    tunnel_protocol: TunnelType | AnyConstraint | None = None
    wireguard_constraints: WireguardConstraints | None = None
    openvpn_constraints: OpenVpnConstraints | None = None


class NormalRelaySettings(_Value):
    kind: Literal["normal"] = "normal"
    constraints: RelayConstraints = Field(default_factory=RelayConstraints)

    def merge(self, update: RelaySettingsUpdate) -> RelaySettings:
        return _merge(self, update)


class CustomRelaySettings(_Value):
    """A single user-supplied tunnel endpoint that bypasses relay selection."""

    kind: Literal["custom_tunnel_endpoint"] = "custom_tunnel_endpoint"
    host: str = Field(min_length=1)
    port: Port
    tunnel_type: TunnelType = TunnelType.OPENVPN
    protocol: TransportProtocol = TransportProtocol.UDP

    def merge(self, update: RelaySettingsUpdate) -> RelaySettings:
        return _merge(self, update)

    def supports_bridge(self) -> bool:
        # Bridges only carry OpenVPN over TCP.
        return self.tunnel_type == TunnelType.OPENVPN and self.protocol == TransportProtocol.TCP


class NormalRelaySettingsUpdate(_Value):
    kind: Literal["normal"] = "normal"
    constraints: RelayConstraintsUpdate = Field(default_factory=RelayConstraintsUpdate)

    def supports_bridge(self) -> bool:
        constraints = self.constraints
        if constraints.tunnel_protocol == TunnelType.WIREGUARD:
            return False
        openvpn = constraints.openvpn_constraints
        if openvpn is not None and isinstance(openvpn.port, TransportPort):
            return openvpn.port.protocol != TransportProtocol.UDP
        return True


RelaySettings = Annotated[Union[NormalRelaySettings, CustomRelaySettings], Field(discriminator="kind")]
RelaySettingsUpdate = Annotated[
    Union[NormalRelaySettingsUpdate, CustomRelaySettings], Field(discriminator="kind")
]


def _merge(current: NormalRelaySettings | CustomRelaySettings, update: RelaySettingsUpdate) -> RelaySettings:
    if isinstance(update, CustomRelaySettings):
        return update
    # Switching from a custom endpoint back to relay selection starts from default constraints.
    base = current.constraints if isinstance(current, NormalRelaySettings) else RelayConstraints()
    return NormalRelaySettings(constraints=base.merge(update.constraints))


def default_relay_settings() -> NormalRelaySettings:
    return NormalRelaySettings(constraints=RelayConstraints(location=LocationConstraint(country="se")))


class BridgeConstraints(_Value):
    location: LocationConstraint | AnyConstraint = ANY
    providers: list[str] | AnyConstraint = ANY


class ProxyAuth(_Value):
    username: str
    password: str


class LocalProxySettings(_Value):
    type: Literal["local"] = "local"
    port: Port
    # host:port of the remote end the local proxy forwards to.
    peer: str


class RemoteProxySettings(_Value):
    type: Literal["remote"] = "remote"
    address: str
    auth: ProxyAuth | None = None


ProxySettings = Annotated[Union[LocalProxySettings, RemoteProxySettings], Field(discriminator="type")]


class NormalBridgeSettings(_Value):
    kind: Literal["normal"] = "normal"
    constraints: BridgeConstraints = Field(default_factory=BridgeConstraints)


class CustomBridgeSettings(_Value):
    kind: Literal["custom"] = "custom"
    proxy: ProxySettings


BridgeSettings = Annotated[Union[NormalBridgeSettings, CustomBridgeSettings], Field(discriminator="kind")]


class Udp2TcpObfuscationSettings(_Value):
    port: Port | AnyConstraint = ANY


class ObfuscationSettings(_Value):
    selected_obfuscation: SelectedObfuscation = SelectedObfuscation.OFF
    udp2tcp: Udp2TcpObfuscationSettings = Field(default_factory=Udp2TcpObfuscationSettings)

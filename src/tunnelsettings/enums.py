from enum import Enum


class BridgeState(str, Enum):
    AUTO = "auto"
    ON = "on"
    OFF = "off"


class SelectedObfuscation(str, Enum):
    AUTO = "auto"
    OFF = "off"
    UDP2TCP = "udp2tcp"


class TunnelType(str, Enum):
    OPENVPN = "openvpn"
    WIREGUARD = "wireguard"


class TransportProtocol(str, Enum):
    UDP = "udp"
    TCP = "tcp"


class IpVersion(str, Enum):
    V4 = "v4"
    V6 = "v6"


class DnsState(str, Enum):
    DEFAULT = "default"
    CUSTOM = "custom"


class TargetOs(str, Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    ANDROID = "android"
    IOS = "ios"

    @property
    def is_mobile(self) -> bool:
        return self in {TargetOs.ANDROID, TargetOs.IOS}

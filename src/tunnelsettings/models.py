from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from tunnelsettings.enums import BridgeState, TargetOs
from tunnelsettings.relay_constraints import (
    BridgeSettings,
    NormalBridgeSettings,
    ObfuscationSettings,
    RelaySettings,
    RelaySettingsUpdate,
    default_relay_settings,
)
from tunnelsettings.target import TARGET_OS
from tunnelsettings.tunnel_options import TunnelOptions
from tunnelsettings.version import CURRENT_SETTINGS_VERSION, MissingSettingsVersionError, SettingsVersion

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """
    Daemon settings aggregate.

    `relay_settings`, `bridge_state` and `settings_version` are frozen against
    attribute assignment. Relay settings and bridge state change through the
    accessor methods, which report whether anything changed. The version only
    changes by decoding (or migrating) a whole document.

    Decoding is default-on-absence for every field except `settings_version`.
    """

    model_config = ConfigDict(validate_assignment=True)

    relay_settings: RelaySettings = Field(default_factory=default_relay_settings, frozen=True)
    bridge_settings: BridgeSettings = Field(default_factory=NormalBridgeSettings)
    obfuscation_settings: ObfuscationSettings = Field(default_factory=ObfuscationSettings)
    bridge_state: BridgeState = Field(default=BridgeState.AUTO, frozen=True)
    # Allow communication with private (LAN) networks.
    allow_lan: bool = False
    # Block all traffic while disconnected, not only while connecting.
    block_when_disconnected: bool = False
    # Connect the tunnel when the daemon starts.
    auto_connect: bool = False
    tunnel_options: TunnelOptions = Field(default_factory=TunnelOptions)
    show_beta_releases: bool = False
    settings_version: SettingsVersion = Field(default=CURRENT_SETTINGS_VERSION, frozen=True)

    @field_validator("settings_version", mode="before")
    @classmethod
    def _decode_settings_version(cls, value: Any) -> SettingsVersion:
        if isinstance(value, SettingsVersion):
            return value
        return SettingsVersion.decode(value)

    @field_serializer("settings_version")
    def _encode_settings_version(self, value: SettingsVersion) -> int:
        return value.encode()

    @classmethod
    def decode(cls, document: Mapping[str, Any]) -> Settings:
        if "settings_version" not in document:
            raise MissingSettingsVersionError()
        # Checked up front so callers get the version error itself rather than a ValidationError.
        SettingsVersion.decode(document["settings_version"])
        return cls.model_validate(dict(document))

    def encode(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def _commit(self, **changes: Any) -> None:
        # Writes every change in one step, bypassing the frozen-field guard.
        self.__dict__.update(changes)
        self.__pydantic_fields_set__.update(changes)

    def get_relay_settings(self) -> RelaySettings:
        return self.relay_settings.model_copy(deep=True)

    def update_relay_settings(self, update: RelaySettingsUpdate) -> bool:
        update_supports_bridge = update.supports_bridge()
        new_settings = self.relay_settings.merge(update)
        if new_settings == self.relay_settings:
            return False

        changes: dict[str, Any] = {"relay_settings": new_settings}
        if not update_supports_bridge and self.bridge_state == BridgeState.ON:
            changes["bridge_state"] = BridgeState.AUTO
        logger.debug("relay_settings_changed from=%s to=%s", self.relay_settings, new_settings)
        self._commit(**changes)
        return True

    def get_bridge_state(self) -> BridgeState:
        return self.bridge_state

    def set_bridge_state(self, bridge_state: BridgeState) -> bool:
        # Compatibility with the current relay settings is the caller's concern here.
        bridge_state = BridgeState(bridge_state)
        if self.bridge_state == bridge_state:
            return False
        self._commit(bridge_state=bridge_state)
        return True

    def get_settings_version(self) -> SettingsVersion:
        return self.settings_version


class SplitTunnelSettings(BaseModel):
    enable_exclusions: bool = False
    # Executables excluded from the tunnel.
    apps: set[Path] = Field(default_factory=set)


class WindowsSettings(Settings):
    split_tunnel: SplitTunnelSettings = Field(default_factory=SplitTunnelSettings)


def settings_model_for(target_os: TargetOs) -> type[Settings]:
    if target_os == TargetOs.WINDOWS:
        return WindowsSettings
    return Settings


SettingsModel = settings_model_for(TARGET_OS)

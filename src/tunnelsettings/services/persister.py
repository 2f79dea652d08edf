from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from tunnelsettings.enums import BridgeState
from tunnelsettings.models import Settings, SettingsModel
from tunnelsettings.observability import record_settings_change, record_settings_load
from tunnelsettings.relay_constraints import BridgeSettings, ObfuscationSettings, RelaySettingsUpdate
from tunnelsettings.tunnel_options import TunnelOptions
from tunnelsettings.version import InvalidSettingsVersionError

from .migrations import MigrationError, MigrationRegistry, default_registry

logger = logging.getLogger(__name__)


class SettingsLoadError(RuntimeError):
    pass


class SettingsPersister:
    """
    Single owner of the daemon's settings aggregate.

    Every read and mutation goes through one lock. A mutation runs against a
    copy which only replaces the held aggregate once it has been written, so a
    failed write leaves both memory and disk at the previous state.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        model: type[Settings] = SettingsModel,
        registry: MigrationRegistry = default_registry,
    ) -> None:
        self.path = Path(path)
        self._model = model
        self._registry = registry
        self._lock = threading.Lock()
        self._settings = model()

    @property
    def settings(self) -> Settings:
        with self._lock:
            return self._settings.model_copy(deep=True)

    def load(self) -> Settings:
        with self._lock:
            if not self.path.exists():
                logger.info("settings_missing path=%s using_defaults=true", self.path)
                self._settings = self._model()
                record_settings_load("defaults")
                return self._settings.model_copy(deep=True)

            try:
                document = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                record_settings_load("failed")
                raise SettingsLoadError(f"cannot read settings from {self.path}: {exc}") from exc
            if not isinstance(document, dict):
                record_settings_load("failed")
                raise SettingsLoadError(f"settings document in {self.path} is not an object")

            try:
                migrated = self._registry.migrate_document(document)
                settings = self._model.decode(migrated)
            except (InvalidSettingsVersionError, MigrationError, ValidationError) as exc:
                record_settings_load("failed")
                raise SettingsLoadError(f"cannot load settings from {self.path}: {exc}") from exc

            if migrated is not document:
                try:
                    self._write(settings)
                except OSError as exc:
                    record_settings_load("failed")
                    raise SettingsLoadError(f"cannot save migrated settings to {self.path}: {exc}") from exc
                record_settings_load("migrated")
            else:
                record_settings_load("ok")
            self._settings = settings
            logger.info(
                "settings_loaded path=%s version=%s", self.path, settings.get_settings_version().encode()
            )
            return settings.model_copy(deep=True)

    def reset(self) -> None:
        with self._lock:
            settings = self._model()
            self._write(settings)
            self._settings = settings
        record_settings_change("reset")
        logger.info("settings_reset path=%s", self.path)

    def update_relay_settings(self, update: RelaySettingsUpdate) -> bool:
        return self._mutate("update_relay_settings", lambda settings: settings.update_relay_settings(update))

    def set_bridge_state(self, bridge_state: BridgeState) -> bool:
        return self._mutate("set_bridge_state", lambda settings: settings.set_bridge_state(bridge_state))

    def set_bridge_settings(self, bridge_settings: BridgeSettings) -> bool:
        return self._set_field("bridge_settings", bridge_settings)

    def set_obfuscation_settings(self, obfuscation_settings: ObfuscationSettings) -> bool:
        return self._set_field("obfuscation_settings", obfuscation_settings)

    def set_tunnel_options(self, tunnel_options: TunnelOptions) -> bool:
        return self._set_field("tunnel_options", tunnel_options)

    def set_allow_lan(self, allow_lan: bool) -> bool:
        return self._set_field("allow_lan", allow_lan)

    def set_block_when_disconnected(self, block_when_disconnected: bool) -> bool:
        return self._set_field("block_when_disconnected", block_when_disconnected)

    def set_auto_connect(self, auto_connect: bool) -> bool:
        return self._set_field("auto_connect", auto_connect)

    def set_show_beta_releases(self, show_beta_releases: bool) -> bool:
        return self._set_field("show_beta_releases", show_beta_releases)

    def _set_field(self, name: str, value: Any) -> bool:
        def _apply(settings: Settings) -> bool:
            if getattr(settings, name) == value:
                return False
            # Hold a private copy so later changes to the caller's object stay out of the held state.
            setattr(settings, name, value.model_copy(deep=True) if isinstance(value, BaseModel) else value)
            return True

        return self._mutate(f"set_{name}", _apply)

    def _mutate(self, operation: str, apply: Callable[[Settings], bool]) -> bool:
        with self._lock:
            candidate = self._settings.model_copy(deep=True)
            if not apply(candidate):
                return False
            self._write(candidate)
            self._settings = candidate
        record_settings_change(operation)
        logger.info("settings_changed operation=%s", operation)
        return True

    def _write(self, settings: Settings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(settings.encode(), ensure_ascii=True, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self.path)

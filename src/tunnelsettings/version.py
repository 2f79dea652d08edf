from __future__ import annotations

from enum import IntEnum
from typing import Any


class InvalidSettingsVersionError(ValueError):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a valid SettingsVersion")


class MissingSettingsVersionError(InvalidSettingsVersionError):
    def __init__(self) -> None:
        self.value = None
        ValueError.__init__(self, "settings_version is missing from the settings document")


class SettingsVersion(IntEnum):
    """
    Schema generation of the persisted settings document.

    Serialized as a bare integer so that any reader can tell the layout
    generation apart before interpreting the rest of the document.
    """

    V2 = 2
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6

    @classmethod
    def decode(cls, raw: Any) -> SettingsVersion:
        # bool is an int subclass; True must not decode as a version.
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise InvalidSettingsVersionError(raw)
        try:
            return cls(raw)
        except ValueError:
            raise InvalidSettingsVersionError(raw) from None

    def encode(self) -> int:
        return int(self.value)

    def next(self) -> SettingsVersion | None:
        try:
            return SettingsVersion(self.value + 1)
        except ValueError:
            return None


# Bump together with a new SettingsVersion member and its migration step.
CURRENT_SETTINGS_VERSION = SettingsVersion.V6

if CURRENT_SETTINGS_VERSION is not max(SettingsVersion):
    raise RuntimeError("CURRENT_SETTINGS_VERSION must be the newest SettingsVersion")

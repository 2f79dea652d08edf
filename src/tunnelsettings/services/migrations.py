from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from tunnelsettings.version import CURRENT_SETTINGS_VERSION, MissingSettingsVersionError, SettingsVersion

logger = logging.getLogger(__name__)

MigrationStep = Callable[[dict[str, Any]], dict[str, Any]]


class MigrationError(RuntimeError):
    pass


def needs_migration(version: SettingsVersion) -> bool:
    return version < CURRENT_SETTINGS_VERSION


class MigrationRegistry:
    """
    Ordered upgrade steps for persisted settings documents.

    A step registered for version N receives a document at N and returns the
    document layout of N + 1. The registry stamps the new version itself, so
    steps only transform fields.
    """

    def __init__(self) -> None:
        self._steps: dict[SettingsVersion, MigrationStep] = {}

    def register(self, from_version: SettingsVersion) -> Callable[[MigrationStep], MigrationStep]:
        if from_version.next() is None:
            raise MigrationError(f"no newer version to migrate {from_version.encode()} to")

        def _decorator(step: MigrationStep) -> MigrationStep:
            if from_version in self._steps:
                raise MigrationError(f"migration from version {from_version.encode()} is already registered")
            self._steps[from_version] = step
            return step

        return _decorator

    def migrate_document(self, document: dict[str, Any]) -> dict[str, Any]:
        if "settings_version" not in document:
            raise MissingSettingsVersionError()
        version = SettingsVersion.decode(document["settings_version"])
        if not needs_migration(version):
            return document

        migrated = copy.deepcopy(document)
        while needs_migration(version):
            step = self._steps.get(version)
            if step is None:
                raise MigrationError(f"no migration registered from settings version {version.encode()}")
            next_version = version.next()
            migrated = step(migrated)
            migrated["settings_version"] = next_version.encode()
            logger.info("settings_migrated from=%s to=%s", version.encode(), next_version.encode())
            version = next_version
        return migrated


# Concrete layout upgrades register themselves here.
default_registry = MigrationRegistry()

import pytest

from tunnelsettings.services.migrations import MigrationError, MigrationRegistry, default_registry, needs_migration
from tunnelsettings.version import InvalidSettingsVersionError, MissingSettingsVersionError, SettingsVersion


def _full_chain() -> MigrationRegistry:
    registry = MigrationRegistry()
    for version in (SettingsVersion.V2, SettingsVersion.V3, SettingsVersion.V4, SettingsVersion.V5):

        @registry.register(version)
        def _step(document: dict, _version: SettingsVersion = version) -> dict:
            document.setdefault("steps", []).append(_version.encode())
            return document

    return registry


def test_needs_migration_only_below_current() -> None:
    assert needs_migration(SettingsVersion.V2) is True
    assert needs_migration(SettingsVersion.V5) is True
    assert needs_migration(SettingsVersion.V6) is False


def test_default_registry_ships_without_steps() -> None:
    assert default_registry.migrate_document({"settings_version": 6}) == {"settings_version": 6}
    with pytest.raises(MigrationError):
        default_registry.migrate_document({"settings_version": 2})


def test_current_document_is_returned_unchanged() -> None:
    document = {"settings_version": 6, "allow_lan": True}

    assert _full_chain().migrate_document(document) is document


def test_steps_run_in_order_and_stamp_versions() -> None:
    document = {"settings_version": 3, "allow_lan": True}

    migrated = _full_chain().migrate_document(document)

    assert migrated["steps"] == [3, 4, 5]
    assert migrated["settings_version"] == 6
    assert migrated["allow_lan"] is True
    # The input document is left as it was read.
    assert document == {"settings_version": 3, "allow_lan": True}


def test_gap_in_chain_raises() -> None:
    registry = MigrationRegistry()

    @registry.register(SettingsVersion.V4)
    def _step(document: dict) -> dict:
        return document

    with pytest.raises(MigrationError, match="from settings version 5"):
        registry.migrate_document({"settings_version": 4})


def test_duplicate_registration_rejected() -> None:
    registry = MigrationRegistry()
    registry.register(SettingsVersion.V2)(lambda document: document)

    with pytest.raises(MigrationError, match="already registered"):
        registry.register(SettingsVersion.V2)(lambda document: document)


def test_newest_version_cannot_have_a_step() -> None:
    with pytest.raises(MigrationError):
        MigrationRegistry().register(SettingsVersion.V6)


def test_invalid_or_missing_version_rejected() -> None:
    with pytest.raises(InvalidSettingsVersionError):
        _full_chain().migrate_document({"settings_version": 1})
    with pytest.raises(MissingSettingsVersionError):
        _full_chain().migrate_document({})

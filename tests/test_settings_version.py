import pytest

from tunnelsettings.version import (
    CURRENT_SETTINGS_VERSION,
    InvalidSettingsVersionError,
    SettingsVersion,
)


@pytest.mark.parametrize("version", list(SettingsVersion))
def test_decode_accepts_every_known_version(version: SettingsVersion) -> None:
    assert SettingsVersion.decode(version.encode()) is version


@pytest.mark.parametrize("raw", [-1, 0, 1, 7, 99, 2**32])
def test_decode_rejects_unknown_versions(raw: int) -> None:
    with pytest.raises(InvalidSettingsVersionError, match=f"{raw} is not a valid SettingsVersion") as exc_info:
        SettingsVersion.decode(raw)

    assert exc_info.value.value == raw


@pytest.mark.parametrize("raw", [True, "6", 6.0, None])
def test_decode_rejects_non_integer_tags(raw) -> None:
    with pytest.raises(InvalidSettingsVersionError):
        SettingsVersion.decode(raw)


def test_current_version_is_newest_defined_version() -> None:
    assert CURRENT_SETTINGS_VERSION is max(SettingsVersion)
    assert CURRENT_SETTINGS_VERSION.encode() == 6


def test_versions_are_ordered_by_value() -> None:
    assert sorted(SettingsVersion, reverse=True)[0] is SettingsVersion.V6
    assert SettingsVersion.V2 < SettingsVersion.V5 < CURRENT_SETTINGS_VERSION


def test_next_version() -> None:
    assert SettingsVersion.V2.next() is SettingsVersion.V3
    assert SettingsVersion.V6.next() is None

from __future__ import annotations

import sys

from tunnelsettings.enums import TargetOs


def detect_target_os(platform: str | None = None) -> TargetOs:
    raw = (platform or sys.platform).lower()
    if raw.startswith("win") or raw == "cygwin":
        return TargetOs.WINDOWS
    if raw == "darwin":
        return TargetOs.MACOS
    if raw == "android":
        return TargetOs.ANDROID
    if raw in {"ios", "ipados"}:
        return TargetOs.IOS
    return TargetOs.LINUX


# Resolved once per process; platform-conditional models are chosen from this.
TARGET_OS = detect_target_os()

from __future__ import annotations

import logging

from prometheus_client import Counter

_SETTINGS_CHANGES_TOTAL = Counter(
    "tunnelsettings_settings_changes_total",
    "Settings mutations that changed the persisted state",
    labelnames=["operation"],
)
_SETTINGS_LOADS_TOTAL = Counter(
    "tunnelsettings_settings_loads_total",
    "Settings document loads by outcome",
    labelnames=["result"],
)

_metrics_enabled = True


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def set_metrics_enabled(enabled: bool) -> None:
    global _metrics_enabled
    _metrics_enabled = bool(enabled)


def record_settings_change(operation: str) -> None:
    if _metrics_enabled:
        _SETTINGS_CHANGES_TOTAL.labels(operation).inc()


def record_settings_load(result: str) -> None:
    if _metrics_enabled:
        _SETTINGS_LOADS_TOTAL.labels(result).inc()

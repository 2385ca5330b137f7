"""
SECURITY METRICS
================
Prometheus-backed counters for credential encryption events.
"""

from __future__ import annotations

import threading
from typing import Dict

from prometheus_client import Counter

from Security.security_config import get_bool, load_env_file


FIELD_ENCRYPT = "field-encrypt"
FIELD_DECRYPT = "field-decrypt"
INTEGRITY_FAILURE = "integrity-failure"
PLAINTEXT_FALLBACK = "plaintext-fallback"

_FEATURE_EVENTS = None
_INIT_LOCK = threading.Lock()


def _enabled() -> bool:
    load_env_file()
    return get_bool("PROMETHEUS_ENABLED", True)


def init_metrics() -> None:
    global _FEATURE_EVENTS
    if _FEATURE_EVENTS is not None or not _enabled():
        return
    # The registry rejects a second Counter with the same name
    with _INIT_LOCK:
        if _FEATURE_EVENTS is not None:
            return
        _FEATURE_EVENTS = Counter(
            "security_feature_events_total",
            "Count of security feature events",
            ["feature"],
        )


def increment_feature_event(feature: str, amount: int = 1) -> None:
    init_metrics()
    if _FEATURE_EVENTS is None:
        return
    _FEATURE_EVENTS.labels(feature=feature).inc(amount)


def _counter_value(counter, feature: str) -> int:
    return int(counter.labels(feature=feature)._value.get())


def get_feature_metrics_snapshot(features: list[str]) -> Dict[str, Dict[str, int]]:
    init_metrics()
    snapshot: Dict[str, Dict[str, int]] = {}
    for feature in features:
        events = _counter_value(_FEATURE_EVENTS, feature) if _FEATURE_EVENTS is not None else 0
        snapshot[feature] = {"events": events}
    return snapshot

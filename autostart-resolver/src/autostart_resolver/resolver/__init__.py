from __future__ import annotations

from autostart_resolver.resolver.ladder import (
    DISPATCHED_APP_DETAIL_FALLBACK,
    DISPATCHED_GENERIC_SETTINGS_FALLBACK,
    DISPATCHED_VENDOR_TARGET,
    AutostartResolver,
    Resolution,
    ResolutionOutcome,
    TierAttempt,
)

__all__ = [
    "DISPATCHED_APP_DETAIL_FALLBACK",
    "DISPATCHED_GENERIC_SETTINGS_FALLBACK",
    "DISPATCHED_VENDOR_TARGET",
    "AutostartResolver",
    "Resolution",
    "ResolutionOutcome",
    "TierAttempt",
]

"""Fallback ladder for opening the best available autostart settings screen.

Tiers, each strictly more general and more reliable than the previous one:

  1. the vendor autostart/battery activity from the catalog, if the probe
     reports it resolvable
  2. the app-details settings page for our own package
  3. the settings root

A tier is abandoned only when it fails (absent from the catalog, not
resolvable, or an exception while probing, building or dispatching). Every
request terminates in a dispatch; no exception crosses :meth:`resolve`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol, Tuple

from autostart_resolver.catalog.targets import (
    BUILTIN_CATALOG,
    TargetCatalog,
    TargetDescriptor,
    normalize_vendor_key,
)
from autostart_resolver.runtime.android.intents import (
    LaunchRequest,
    app_details_request,
    settings_root_request,
    vendor_target_request,
)

logger = logging.getLogger(__name__)

ResolutionOutcome = Literal[
    "dispatched_vendor_target",
    "dispatched_app_detail_fallback",
    "dispatched_generic_settings_fallback",
]

DISPATCHED_VENDOR_TARGET: ResolutionOutcome = "dispatched_vendor_target"
DISPATCHED_APP_DETAIL_FALLBACK: ResolutionOutcome = "dispatched_app_detail_fallback"
DISPATCHED_GENERIC_SETTINGS_FALLBACK: ResolutionOutcome = "dispatched_generic_settings_fallback"

Tier = Literal["vendor_target", "app_details", "settings_root"]


class AvailabilityProbe(Protocol):
    def is_resolvable(self, descriptor: TargetDescriptor) -> bool: ...


class Dispatcher(Protocol):
    def dispatch(self, request: LaunchRequest) -> Any: ...


@dataclass(frozen=True)
class TierAttempt:
    tier: Tier
    reason: str
    request: Optional[LaunchRequest] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier,
            "reason": self.reason,
            "request": self.request.to_dict() if self.request is not None else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class Resolution:
    outcome: ResolutionOutcome
    vendor_key: str
    request: LaunchRequest
    descriptor: Optional[TargetDescriptor] = None
    attempts: Tuple[TierAttempt, ...] = field(default_factory=tuple)
    # False only when the settings root itself failed to launch.
    delivered: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome,
            "vendor_key": self.vendor_key,
            "descriptor": self.descriptor.to_dict() if self.descriptor is not None else None,
            "request": self.request.to_dict(),
            "delivered": self.delivered,
            "attempts": [a.to_dict() for a in self.attempts],
        }


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


class AutostartResolver:
    def __init__(
        self,
        *,
        probe: AvailabilityProbe,
        dispatcher: Dispatcher,
        catalog: TargetCatalog = BUILTIN_CATALOG,
    ) -> None:
        self._probe = probe
        self._dispatcher = dispatcher
        self._catalog = catalog

    @property
    def catalog(self) -> TargetCatalog:
        return self._catalog

    def resolve(self, vendor: Optional[str], own_package: str) -> Resolution:
        """Dispatch the most specific usable settings screen for ``vendor``."""

        package = str(own_package or "").strip()
        if not package:
            raise ValueError("own_package must be a non-empty package name")

        vendor_key = normalize_vendor_key(vendor)
        attempts: list[TierAttempt] = []

        descriptor = self._catalog.lookup(vendor_key)
        if descriptor is None:
            logger.debug("no catalog entry for vendor %r", vendor_key)
            attempts.append(TierAttempt(tier="vendor_target", reason="not_in_catalog"))
        else:
            request = self._try_vendor_target(descriptor, attempts)
            if request is not None:
                return Resolution(
                    outcome=DISPATCHED_VENDOR_TARGET,
                    vendor_key=vendor_key,
                    request=request,
                    descriptor=descriptor,
                    attempts=tuple(attempts),
                )

        request = app_details_request(package)
        try:
            self._dispatcher.dispatch(request)
        except Exception as e:
            logger.warning("app details launch failed for %s: %s", package, e)
            attempts.append(
                TierAttempt(
                    tier="app_details",
                    reason="dispatch_failed",
                    request=request,
                    error=_describe(e),
                )
            )
        else:
            return Resolution(
                outcome=DISPATCHED_APP_DETAIL_FALLBACK,
                vendor_key=vendor_key,
                request=request,
                descriptor=descriptor,
                attempts=tuple(attempts),
            )

        request = settings_root_request()
        delivered = True
        try:
            self._dispatcher.dispatch(request)
        except Exception as e:
            # TODO: expose a distinct "nothing could be opened" outcome once callers
            # have a way to show it; for now the caller only sees delivered=False.
            logger.error("settings root launch failed; nothing was opened: %s", e)
            attempts.append(
                TierAttempt(
                    tier="settings_root",
                    reason="dispatch_failed",
                    request=request,
                    error=_describe(e),
                )
            )
            delivered = False

        return Resolution(
            outcome=DISPATCHED_GENERIC_SETTINGS_FALLBACK,
            vendor_key=vendor_key,
            request=request,
            descriptor=descriptor,
            attempts=tuple(attempts),
            delivered=delivered,
        )

    def _try_vendor_target(
        self, descriptor: TargetDescriptor, attempts: list[TierAttempt]
    ) -> Optional[LaunchRequest]:
        try:
            resolvable = bool(self._probe.is_resolvable(descriptor))
        except Exception as e:
            logger.warning("availability probe raised for %s: %s", descriptor.component, e)
            attempts.append(
                TierAttempt(tier="vendor_target", reason="probe_failed", error=_describe(e))
            )
            return None

        if not resolvable:
            logger.info("vendor target %s is not resolvable", descriptor.component)
            attempts.append(TierAttempt(tier="vendor_target", reason="not_resolvable"))
            return None

        request: Optional[LaunchRequest] = None
        try:
            request = vendor_target_request(descriptor)
            self._dispatcher.dispatch(request)
        except Exception as e:
            logger.warning(
                "vendor target %s resolved but failed to launch: %s", descriptor.component, e
            )
            attempts.append(
                TierAttempt(
                    tier="vendor_target",
                    reason="dispatch_failed",
                    request=request,
                    error=_describe(e),
                )
            )
            return None
        return request

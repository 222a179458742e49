"""Request boundary: "open the autostart settings screen for this device".

Callers (a UI action, a message handler, the CLI) hold one
:class:`AutostartService` per device and call
:meth:`AutostartService.open_autostart_settings` with no arguments. The
service reads the ambient vendor identity and hands it to the resolver
explicitly.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from autostart_resolver.config.loader import ResolverConfig, clean_package
from autostart_resolver.resolver.ladder import AutostartResolver, Resolution
from autostart_resolver.runtime.android.controller import (
    AndroidController,
    AndroidControllerError,
)
from autostart_resolver.runtime.android.dispatcher import AdbDispatcher
from autostart_resolver.runtime.android.identity import (
    PlatformIdentityError,
    read_vendor_identity,
)
from autostart_resolver.runtime.android.probe import AdbAvailabilityProbe

logger = logging.getLogger(__name__)

METHOD_OPEN_AUTOSTART = "openAutoStart"


class AutostartService:
    def __init__(
        self,
        *,
        controller: Any,
        resolver: AutostartResolver,
        own_package: str,
    ) -> None:
        self._controller = controller
        self._resolver = resolver
        self._own_package = own_package

    @classmethod
    def from_config(
        cls, cfg: ResolverConfig, *, controller: Optional[Any] = None
    ) -> "AutostartService":
        own_package = clean_package(cfg.package)
        if own_package is None:
            raise ValueError("own package is not configured (set package / $AUTOSTART_PACKAGE)")
        if controller is None:
            controller = AndroidController(
                adb_path=cfg.adb_path, serial=cfg.serial, timeout_s=cfg.timeout_s
            )
        resolver = AutostartResolver(
            probe=AdbAvailabilityProbe(controller=controller),
            dispatcher=AdbDispatcher(controller=controller),
            catalog=cfg.build_catalog(),
        )
        return cls(controller=controller, resolver=resolver, own_package=own_package)

    @property
    def resolver(self) -> AutostartResolver:
        return self._resolver

    def current_vendor(self) -> str:
        try:
            return read_vendor_identity(self._controller)
        except (PlatformIdentityError, AndroidControllerError) as e:
            logger.warning("could not read vendor identity, using app details: %s", e)
            return ""

    def open_autostart_settings(self) -> Resolution:
        return self._resolver.resolve(self.current_vendor(), self._own_package)

    def handle_method(self, method: str) -> Dict[str, Any]:
        if method != METHOD_OPEN_AUTOSTART:
            return {"ok": False, "error": "not_implemented", "method": method}
        resolution = self.open_autostart_settings()
        return {"ok": True, "method": method, **resolution.to_dict()}

"""Availability probe for vendor settings activities.

Catalog presence says nothing about a given device: vendor skins differ by
model, region and firmware, and the owning package is often missing. The
probe asks the package manager whether an explicit component resolves to a
default-category handler right now.

``cmd package resolve-activity --brief`` prints either::

    No activity found

or a priority line followed by the component::

    priority=0 preferredOrder=0 match=0x108000 specificIndex=-1 isDefault=false
    com.miui.securitycenter/com.miui.permcenter.autostart.AutoStartManagementActivity
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from autostart_resolver.catalog.targets import TargetDescriptor
from autostart_resolver.runtime.android.controller import (
    AndroidControllerError,
    parse_component,
)

logger = logging.getLogger(__name__)

_NO_ACTIVITY_MARKERS = ("No activity found", "Error:", "Exception")


def parse_resolved_component(stdout: str) -> Optional[str]:
    """Return the fully-qualified component named in resolve-activity output."""

    txt = (stdout or "").strip()
    if not txt or any(marker in txt for marker in _NO_ACTIVITY_MARKERS):
        return None
    for raw in reversed(txt.splitlines()):
        line = raw.strip()
        if not line or "=" in line:
            continue
        pkg, activity = parse_component(line)
        if pkg and activity:
            return f"{pkg}/{activity}"
    return None


class AdbAvailabilityProbe:
    def __init__(self, *, controller: Any, timeout_s: float | None = None) -> None:
        self._controller = controller
        self._timeout_s = timeout_s

    def is_resolvable(self, descriptor: TargetDescriptor) -> bool:
        try:
            res = self._controller.resolve_activity(
                descriptor.component, timeout_s=self._timeout_s
            )
        except AndroidControllerError as e:
            logger.info("resolve-activity failed for %s: %s", descriptor.component, e)
            return False

        if res.returncode != 0:
            logger.info(
                "resolve-activity rc=%s for %s: %s",
                res.returncode,
                descriptor.component,
                (res.stderr or res.stdout).strip()[:200],
            )
            return False

        resolved = parse_resolved_component(res.stdout)
        if resolved != descriptor.component:
            logger.info("%s is not resolvable on this device", descriptor.component)
            return False
        return True

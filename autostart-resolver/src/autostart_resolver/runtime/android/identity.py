from __future__ import annotations

from typing import Any, Dict, Optional


class PlatformIdentityError(RuntimeError):
    """Raised when the device vendor cannot be read."""


def read_vendor_identity(controller: Any, *, timeout_s: float | None = None) -> str:
    """Return the raw manufacturer string (brand when manufacturer is unset)."""

    for prop in ("ro.product.manufacturer", "ro.product.brand"):
        value = controller.getprop(prop, timeout_s=timeout_s)
        if value:
            return value
    raise PlatformIdentityError("neither ro.product.manufacturer nor ro.product.brand is set")


def read_platform_identity(controller: Any, *, timeout_s: float | None = None) -> Dict[str, Any]:
    def _prop(name: str) -> Optional[str]:
        return controller.getprop(name, timeout_s=timeout_s) or None

    sdk_raw = _prop("ro.build.version.sdk")
    try:
        sdk = int(sdk_raw) if sdk_raw else None
    except ValueError:
        sdk = None

    return {
        "serial": getattr(controller, "serial", None),
        "manufacturer": _prop("ro.product.manufacturer"),
        "brand": _prop("ro.product.brand"),
        "model": _prop("ro.product.model"),
        "android_api_level": sdk,
    }

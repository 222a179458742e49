"""Vendor autostart target catalog.

Maps a normalized manufacturer key to the settings activity that lets the
user allow an app to start in the background. Adding a vendor is a data
change here (or in the config file); the resolver never branches on vendor.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from autostart_resolver.runtime.android.controller import parse_component


class CatalogError(ValueError):
    """Raised for malformed catalog entries."""


@dataclass(frozen=True)
class TargetDescriptor:
    package: str
    activity: str

    @property
    def component(self) -> str:
        return f"{self.package}/{self.activity}"

    @classmethod
    def from_component(cls, component: str) -> "TargetDescriptor":
        pkg, activity = parse_component(component)
        if pkg is None or activity is None:
            raise CatalogError(f"invalid component (expected 'pkg/activity'): {component!r}")
        return cls(package=pkg, activity=activity)

    def to_dict(self) -> Dict[str, str]:
        return {"package": self.package, "activity": self.activity, "component": self.component}


def normalize_vendor_key(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return str(raw).strip().lower()


_MIUI_AUTOSTART = TargetDescriptor(
    "com.miui.securitycenter",
    "com.miui.permcenter.autostart.AutoStartManagementActivity",
)
_HUAWEI_STARTUP = TargetDescriptor(
    "com.huawei.systemmanager",
    "com.huawei.systemmanager.startupmgr.ui.StartupNormalAppListActivity",
)

BUILTIN_TARGETS: Mapping[str, TargetDescriptor] = MappingProxyType(
    {
        "xiaomi": _MIUI_AUTOSTART,
        "redmi": _MIUI_AUTOSTART,
        "oppo": TargetDescriptor(
            "com.coloros.safecenter",
            "com.coloros.safecenter.permission.startup.StartupAppListActivity",
        ),
        "vivo": TargetDescriptor(
            "com.iqoo.secure",
            "com.iqoo.secure.ui.phoneoptimize.BgStartUpManager",
        ),
        "huawei": _HUAWEI_STARTUP,
        "honor": _HUAWEI_STARTUP,
        "oneplus": TargetDescriptor(
            "com.oneplus.security",
            "com.oneplus.security.chainlaunch.view.ChainLaunchAppListActivity",
        ),
        # No real autostart screen on One UI; the battery page is the closest.
        "samsung": TargetDescriptor(
            "com.samsung.android.lool",
            "com.samsung.android.sm.ui.battery.BatteryActivity",
        ),
        "asus": TargetDescriptor(
            "com.asus.mobilemanager",
            "com.asus.mobilemanager.MainActivity",
        ),
    }
)


class TargetCatalog:
    """Read-only vendor -> target mapping."""

    def __init__(self, entries: Mapping[str, TargetDescriptor]) -> None:
        normalized: Dict[str, TargetDescriptor] = {}
        for key, descriptor in entries.items():
            vendor = normalize_vendor_key(key)
            if not vendor:
                raise CatalogError("catalog vendor key must be non-empty")
            if not isinstance(descriptor, TargetDescriptor):
                raise CatalogError(f"catalog entry for {vendor!r} is not a TargetDescriptor")
            normalized[vendor] = descriptor
        self._entries: Mapping[str, TargetDescriptor] = MappingProxyType(normalized)

    def lookup(self, vendor_key: Optional[str]) -> Optional[TargetDescriptor]:
        return self._entries.get(normalize_vendor_key(vendor_key))

    def vendors(self) -> list[str]:
        return sorted(self._entries)

    def items(self) -> Iterable[Tuple[str, TargetDescriptor]]:
        return ((vendor, self._entries[vendor]) for vendor in self.vendors())

    def with_overrides(self, extra: Mapping[str, Any]) -> "TargetCatalog":
        """Return a new catalog with ``extra`` entries layered on top.

        Values may be :class:`TargetDescriptor` instances or component strings
        ('pkg/activity'). Existing vendors are replaced.
        """

        merged: Dict[str, TargetDescriptor] = dict(self._entries)
        for key, value in extra.items():
            if isinstance(value, TargetDescriptor):
                descriptor = value
            elif isinstance(value, str):
                descriptor = TargetDescriptor.from_component(value)
            else:
                raise CatalogError(f"catalog entry for {key!r} must be a component string")
            merged[normalize_vendor_key(key)] = descriptor
        return TargetCatalog(merged)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {vendor: descriptor.to_dict() for vendor, descriptor in self.items()}

    def __contains__(self, vendor_key: object) -> bool:
        return isinstance(vendor_key, str) and normalize_vendor_key(vendor_key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


BUILTIN_CATALOG = TargetCatalog(BUILTIN_TARGETS)


def lookup(vendor_key: Optional[str]) -> Optional[TargetDescriptor]:
    """Look up the built-in catalog."""

    return BUILTIN_CATALOG.lookup(vendor_key)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from autostart_resolver.catalog.targets import TargetDescriptor

FLAG_ACTIVITY_NEW_TASK = 0x10000000

ACTION_APPLICATION_DETAILS_SETTINGS = "android.settings.APPLICATION_DETAILS_SETTINGS"
ACTION_SETTINGS = "android.settings.SETTINGS"


@dataclass(frozen=True)
class LaunchRequest:
    """An explicit or implicit activity launch, rendered for ``am start``."""

    action: Optional[str] = None
    component: Optional[TargetDescriptor] = None
    data: Optional[str] = None
    flags: int = 0

    def __post_init__(self) -> None:
        if not self.action and self.component is None:
            raise ValueError("launch request needs an action or a component")

    @property
    def new_task(self) -> bool:
        return bool(self.flags & FLAG_ACTIVITY_NEW_TASK)

    def to_am_start_args(self) -> list[str]:
        args: list[str] = []
        if self.action:
            args += ["-a", self.action]
        if self.data:
            args += ["-d", self.data]
        if self.component is not None:
            args += ["-n", self.component.component]
        if self.flags:
            args += ["-f", f"0x{self.flags:08x}"]
        return args

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "component": self.component.component if self.component is not None else None,
            "data": self.data,
            "flags": f"0x{self.flags:08x}",
        }


def vendor_target_request(descriptor: TargetDescriptor) -> LaunchRequest:
    return LaunchRequest(component=descriptor, flags=FLAG_ACTIVITY_NEW_TASK)


def app_details_request(package: str) -> LaunchRequest:
    pkg = str(package).strip()
    if not pkg:
        raise ValueError("package must be non-empty")
    return LaunchRequest(
        action=ACTION_APPLICATION_DETAILS_SETTINGS,
        data=f"package:{pkg}",
        flags=FLAG_ACTIVITY_NEW_TASK,
    )


def settings_root_request() -> LaunchRequest:
    return LaunchRequest(action=ACTION_SETTINGS, flags=FLAG_ACTIVITY_NEW_TASK)

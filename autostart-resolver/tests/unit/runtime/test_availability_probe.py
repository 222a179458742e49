from __future__ import annotations

from autostart_fakes import FakeController, resolved_output

from autostart_resolver.catalog.targets import TargetDescriptor, lookup
from autostart_resolver.runtime.android.controller import AdbResult, AndroidControllerError
from autostart_resolver.runtime.android.probe import (
    AdbAvailabilityProbe,
    parse_resolved_component,
)

MIUI = lookup("xiaomi")


def test_parse_resolved_component_brief_output() -> None:
    assert parse_resolved_component(resolved_output(MIUI.component)) == MIUI.component


def test_parse_resolved_component_short_form() -> None:
    out = "priority=0 preferredOrder=0 match=0x0\ncom.asus.mobilemanager/.MainActivity\n"
    assert parse_resolved_component(out) == (
        "com.asus.mobilemanager/com.asus.mobilemanager.MainActivity"
    )


def test_parse_resolved_component_no_activity() -> None:
    assert parse_resolved_component("No activity found\n") is None
    assert parse_resolved_component("") is None


def test_probe_resolvable_when_component_matches() -> None:
    ctr = FakeController(resolve_outputs={MIUI.component: resolved_output(MIUI.component)})
    assert AdbAvailabilityProbe(controller=ctr).is_resolvable(MIUI) is True
    assert ctr.resolved == [MIUI.component]


def test_probe_not_resolvable_when_package_missing() -> None:
    ctr = FakeController()
    assert AdbAvailabilityProbe(controller=ctr).is_resolvable(MIUI) is False


def test_probe_not_resolvable_when_other_component_answers() -> None:
    other = TargetDescriptor("com.android.settings", "com.android.settings.Settings")
    ctr = FakeController(resolve_outputs={MIUI.component: resolved_output(other.component)})
    assert AdbAvailabilityProbe(controller=ctr).is_resolvable(MIUI) is False


def test_probe_swallows_adb_errors_and_nonzero_exit() -> None:
    class _Broken:
        def resolve_activity(self, component, **kwargs):
            raise AndroidControllerError("adb command timed out")

    class _Nonzero:
        def resolve_activity(self, component, **kwargs):
            return AdbResult(args=[], stdout="", stderr="Unknown command", returncode=255)

    assert AdbAvailabilityProbe(controller=_Broken()).is_resolvable(MIUI) is False
    assert AdbAvailabilityProbe(controller=_Nonzero()).is_resolvable(MIUI) is False

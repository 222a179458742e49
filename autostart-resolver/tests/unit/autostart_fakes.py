from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Sequence

from autostart_resolver.catalog.targets import TargetDescriptor
from autostart_resolver.runtime.android.controller import AdbResult
from autostart_resolver.runtime.android.intents import LaunchRequest


class FakeProbe:
    def __init__(
        self,
        *,
        resolvable: bool = True,
        raises: Optional[BaseException] = None,
    ) -> None:
        self._resolvable = resolvable
        self._raises = raises
        self.calls: list[TargetDescriptor] = []

    def is_resolvable(self, descriptor: TargetDescriptor) -> bool:
        self.calls.append(descriptor)
        if self._raises is not None:
            raise self._raises
        return self._resolvable


class FakeDispatcher:
    """Records dispatched requests; ``fail`` decides which ones raise."""

    def __init__(self, *, fail: Callable[[LaunchRequest], bool] = lambda _r: False) -> None:
        self._fail = fail
        self.dispatched: list[LaunchRequest] = []
        self.attempted: list[LaunchRequest] = []

    def dispatch(self, request: LaunchRequest) -> None:
        self.attempted.append(request)
        if self._fail(request):
            raise RuntimeError(f"launch rejected: {request.to_am_start_args()}")
        self.dispatched.append(request)


class FakeController:
    def __init__(
        self,
        *,
        serial: str = "FAKE_SERIAL",
        props: Optional[Mapping[str, str]] = None,
        resolve_outputs: Optional[Mapping[str, str]] = None,
        start_output: str = "Starting: Intent { }\n",
    ) -> None:
        self.serial = serial
        self._props: Dict[str, str] = dict(props or {})
        self._resolve_outputs: Dict[str, str] = dict(resolve_outputs or {})
        self._start_output = start_output
        self.started: list[list[str]] = []
        self.resolved: list[str] = []

    def getprop(self, name: str, *, timeout_s: float | None = None) -> str:
        _ = timeout_s
        return self._props.get(name, "")

    def resolve_activity(self, component: str, **kwargs) -> AdbResult:  # noqa: ARG002
        self.resolved.append(component)
        stdout = self._resolve_outputs.get(component, "No activity found\n")
        return AdbResult(
            args=["adb", "shell", "cmd", "package", "resolve-activity"],
            stdout=stdout,
            stderr="",
            returncode=0,
        )

    def start_activity(self, args: Sequence[str], **kwargs) -> AdbResult:  # noqa: ARG002
        self.started.append(list(args))
        return AdbResult(
            args=["adb", "shell", "am", "start", *args],
            stdout=self._start_output,
            stderr="",
            returncode=0,
        )


def resolved_output(component: str) -> str:
    return (
        "priority=0 preferredOrder=0 match=0x108000 specificIndex=-1 isDefault=false\n"
        f"{component}\n"
    )

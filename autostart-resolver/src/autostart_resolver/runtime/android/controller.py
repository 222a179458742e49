"""Android controller utilities.

A thin wrapper around adb used by the platform identifier, the availability
probe and the launch dispatcher.

Notes
-----
* Every command goes through :meth:`AndroidController.adb` so that the exact
  argument vector is recorded on the returned :class:`AdbResult`.
* Shell commands are assembled with ``shlex.quote``; callers pass argument
  lists, never pre-joined strings with untrusted values.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


class AndroidControllerError(RuntimeError):
    """Raised when an adb operation fails."""


@dataclass(frozen=True)
class AdbResult:
    args: list[str]
    stdout: str
    stderr: str
    returncode: int

    def ok(self) -> bool:
        return self.returncode == 0


def parse_component(component: str) -> Tuple[Optional[str], Optional[str]]:
    """Parse Android component string 'pkg/.Act' or 'pkg/pkg.Act'."""

    component = str(component).strip()
    if "/" not in component:
        return None, None
    pkg, activity = component.split("/", 1)
    pkg = pkg.strip()
    activity = activity.strip()
    if not pkg or not activity:
        return None, None
    if activity.startswith("."):
        activity = pkg + activity
    return pkg, activity


def shell_join(parts: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(p)) for p in parts)


class AndroidController:
    """Thin wrapper around adb for package queries and activity launches."""

    def __init__(
        self,
        *,
        adb_path: str = "adb",
        serial: Optional[str] = None,
        timeout_s: float = 10.0,
    ) -> None:
        self._adb_path = adb_path
        self._serial = serial
        self._timeout_s = timeout_s

    @property
    def serial(self) -> Optional[str]:
        return self._serial

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    def _base_cmd(self) -> list[str]:
        cmd = [self._adb_path]
        if self._serial:
            cmd += ["-s", self._serial]
        return cmd

    def adb(self, *args: str, timeout_s: float | None = None, check: bool = True) -> AdbResult:
        """Run an adb command and return stdout/stderr/returncode.

        A missing adb binary or a timeout is reported as
        :class:`AndroidControllerError` regardless of ``check``.
        """

        cmd = self._base_cmd() + list(args)
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s if timeout_s is None else float(timeout_s),
            )
        except FileNotFoundError as e:
            raise AndroidControllerError(f"adb not found: {self._adb_path}") from e
        except subprocess.TimeoutExpired as e:
            raise AndroidControllerError(f"adb command timed out: {' '.join(cmd)}") from e

        result = AdbResult(
            args=cmd,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            returncode=proc.returncode,
        )
        if check and not result.ok():
            raise AndroidControllerError(
                f"adb command failed (rc={result.returncode}): {' '.join(cmd)}\n"
                f"stdout: {result.stdout}\n"
                f"stderr: {result.stderr}"
            )
        return result

    def adb_shell(
        self,
        command: str,
        *,
        timeout_s: float | None = None,
        timeout_ms: int | None = None,
        check: bool = True,
    ) -> AdbResult:
        if timeout_ms is not None:
            timeout_s = float(timeout_ms) / 1000.0
        return self.adb("shell", command, timeout_s=timeout_s, check=check)

    def getprop(self, name: str, *, timeout_s: float | None = None) -> str:
        """Return a system property value ('' when unset or unreadable)."""

        res = self.adb_shell(shell_join(["getprop", name]), timeout_s=timeout_s, check=False)
        if not res.ok():
            return ""
        return res.stdout.strip()

    def resolve_activity(
        self,
        component: str,
        *,
        category: str | None = "android.intent.category.DEFAULT",
        timeout_s: float | None = None,
    ) -> AdbResult:
        """Ask the package manager which activity handles an explicit component."""

        parts = ["cmd", "package", "resolve-activity", "--brief"]
        if category:
            parts += ["-c", category]
        parts += ["-n", component]
        return self.adb_shell(shell_join(parts), timeout_s=timeout_s, check=False)

    def start_activity(self, args: Sequence[str], *, timeout_s: float | None = None) -> AdbResult:
        """Run ``am start`` with a pre-rendered argument vector."""

        return self.adb_shell(
            shell_join(["am", "start", *args]), timeout_s=timeout_s, check=False
        )


def detect_single_device_serial(*, adb_path: str = "adb", timeout_s: float = 5.0) -> str:
    """Return the only connected adb device serial.

    Raises :class:`AndroidControllerError` with guidance when there are zero
    or multiple devices.
    """

    try:
        proc = subprocess.run(
            [adb_path, "devices"],
            capture_output=True,
            text=True,
            timeout=timeout_s,
        )
    except FileNotFoundError as e:
        raise AndroidControllerError(f"adb not found: {adb_path}") from e
    except subprocess.TimeoutExpired as e:
        raise AndroidControllerError(f"adb devices timed out: {adb_path}") from e

    out = (proc.stdout or "") + "\n" + (proc.stderr or "")
    devices: list[str] = []
    for raw in out.splitlines():
        line = raw.strip()
        if not line or line.startswith("*") or line.startswith("List of devices attached"):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        serial, state = parts[0], parts[1]
        if state == "device":
            devices.append(serial)

    if len(devices) == 1:
        return devices[0]
    if not devices:
        raise AndroidControllerError(
            "No adb devices in state=device; connect a device or pass "
            "--serial/$AUTOSTART_ANDROID_SERIAL."
        )
    raise AndroidControllerError(
        "Multiple adb devices detected; pass --serial or set $AUTOSTART_ANDROID_SERIAL. "
        f"devices={devices}"
    )

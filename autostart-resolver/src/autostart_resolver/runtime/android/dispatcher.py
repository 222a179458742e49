from __future__ import annotations

import logging
import re
from typing import Any

from autostart_resolver.runtime.android.controller import AdbResult, AndroidControllerError
from autostart_resolver.runtime.android.intents import LaunchRequest

logger = logging.getLogger(__name__)


class DispatchError(RuntimeError):
    """Raised when the device rejects a launch request."""


# `am start` exits 0 on many failures and only reports them in its output.
_AM_START_FAILURE_RE = re.compile(
    r"^(Error:|Error type \d+|Exception occurred|java\.lang\.\w+Exception)",
    flags=re.MULTILINE,
)


def am_start_failure(res: AdbResult) -> str | None:
    combined = "\n".join(s for s in (res.stdout, res.stderr) if s).strip()
    if res.returncode != 0:
        return combined[:500] or f"am start exited with rc={res.returncode}"
    m = _AM_START_FAILURE_RE.search(combined)
    if m:
        line_end = combined.find("\n", m.start())
        return combined[m.start() : line_end if line_end != -1 else None].strip()
    return None


class AdbDispatcher:
    def __init__(self, *, controller: Any, timeout_s: float | None = None) -> None:
        self._controller = controller
        self._timeout_s = timeout_s

    def dispatch(self, request: LaunchRequest) -> AdbResult:
        args = request.to_am_start_args()
        try:
            res = self._controller.start_activity(args, timeout_s=self._timeout_s)
        except AndroidControllerError as e:
            raise DispatchError(str(e)) from e

        failure = am_start_failure(res)
        if failure is not None:
            raise DispatchError(f"am start {' '.join(args)}: {failure}")
        logger.debug("dispatched: am start %s", " ".join(args))
        return res

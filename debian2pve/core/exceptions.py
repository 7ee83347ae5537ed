# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/core/exceptions.py
"""
Error types.

Only conditions that must stop the run are exceptions (Fatal and its
subclasses). Best-effort steps report failures as core.steps.StepResult
warnings instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _exit_code(x: Any) -> int:
    try:
        code = int(x)
    except (TypeError, ValueError):
        return 1
    # 0..255 is all a process can report
    if code < 0:
        return 1
    return min(code, 255)


def _one_line(s: str, limit: int = 600) -> str:
    s = " ".join((s or "").split())
    return s if len(s) <= limit else s[: limit - 3] + "..."


@dataclass(eq=False)
class Debian2PveError(Exception):
    """
    Project error: an exit `code`, a one-line `msg`, the underlying `cause`
    and free-form `context` (path, iface, codename ...) for diagnostics.
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _one_line(self.msg) or type(self).__name__
        super().__init__(self.msg)

    def with_context(self, **ctx: Any) -> "Debian2PveError":
        self.context = {**(self.context or {}), **ctx}
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        parts = [self.msg]
        if include_context and self.context:
            parts.append("[" + ", ".join(f"{k}={self.context[k]!r}" for k in sorted(self.context)) + "]")
        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.msg


class Fatal(Debian2PveError):
    """Aborts the run; main() exits with `code`."""


class UnsupportedDistroError(Fatal):
    """Host is not Debian, /etc/os-release is missing, or the codename is not supported."""


class NoPrimaryInterfaceError(Fatal):
    """No `inet static` interface carrying an address was found; there is no bridge target."""


class PackageError(Fatal):
    """An apt-get step failed while --strict-packages was set."""


class InvalidNetmaskError(Debian2PveError):
    """Netmask is not four dotted integers in 0..255."""


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    verbose=0: message, verbose=1: + context, verbose>=2: + cause.
    """
    if isinstance(e, Debian2PveError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__

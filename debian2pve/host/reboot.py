# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/reboot.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ..core.steps import StepResult
from ..core.utils import U

REBOOT_BIN = "/usr/sbin/reboot"
NAME = "reboot"


class Rebooter:
    """
    Final reboot that activates the bridge.

    `pending()` reports what will happen so the run summary can show it;
    `reboot()` does it. Only the running system is ever rebooted.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        delay_s: float = 5.0,
        enabled: bool = True,
        dry_run: bool = False,
        live: bool = True,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.logger = logger
        self.delay_s = delay_s
        self.enabled = enabled
        self.dry_run = dry_run
        self.live = live
        self._sleep = sleep or time.sleep

    def skip_reason(self) -> Optional[str]:
        if not self.enabled:
            return "disabled; reboot manually to activate the bridge"
        if self.dry_run:
            return "dry-run"
        if not self.live:
            return "target root is not the running system"
        return None

    def pending(self) -> StepResult:
        reason = self.skip_reason()
        if reason:
            return StepResult.skipped(NAME, reason).log(self.logger)
        return StepResult(name=NAME, detail=f"in {self.delay_s:g}s")

    def reboot(self) -> StepResult:
        reason = self.skip_reason()
        if reason:
            return StepResult.skipped(NAME, reason).log(self.logger)

        self.logger.info("Done. Rebooting in %g seconds...", self.delay_s)
        self._sleep(self.delay_s)
        U.run_cmd(self.logger, [REBOOT_BIN], fatal=True)
        return StepResult(name=NAME, detail=REBOOT_BIN).log(self.logger)

# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/postfix.py
"""
Postfix main.cf patch.

A numeric hostname makes the postfix postinst fail, which in turn breaks the
proxmox-ve install. Commenting out `myhostname` lets postfix fall back to
its own default.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

from ..core.file_ops import atomic_write_text
from ..core.steps import StepResult
from ..core.utils import CmdError, U

MAIN_CF = "/etc/postfix/main.cf"
PLACEHOLDER = "# Placeholder for Postfix config\n"
FORCED_LINE = "#myhostname = forced"

_MYHOSTNAME_RE = re.compile(r"^[ \t]*myhostname[ \t]*=.*$", re.MULTILINE)


def comment_out_myhostname(text: str) -> str:
    return _MYHOSTNAME_RE.sub(FORCED_LINE, text)


class PostfixPatcher:
    def __init__(
        self,
        logger: logging.Logger,
        path: Path = Path(MAIN_CF),
        *,
        dry_run: bool = False,
        live: bool = True,
    ):
        self.logger = logger
        self.path = Path(path)
        self.dry_run = dry_run
        self.live = live

    def patch(self) -> StepResult:
        name = "postfix myhostname patch"
        if self.dry_run:
            return StepResult.skipped(name).log(self.logger)

        try:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(PLACEHOLDER, encoding="utf-8")
                self.logger.info("Created placeholder %s", self.path)

            old = self.path.read_text(encoding="utf-8", errors="replace")
            new = comment_out_myhostname(old)
            if new == old:
                return StepResult(name=name, detail="already patched").log(self.logger)
            atomic_write_text(self.path, new)
        except OSError as e:
            return StepResult.warning(name, f"{self.path}: {e}").log(self.logger)
        return StepResult(name=name, detail=str(self.path)).log(self.logger)

    def reload(self) -> StepResult:
        name = "systemctl reload postfix"
        if self.dry_run:
            return StepResult.skipped(name).log(self.logger)
        if not self.live:
            return StepResult.skipped(name, "target root is not the running system").log(self.logger)
        try:
            U.run_cmd(self.logger, ["systemctl", "reload", "postfix"], capture=True, timeout=120)
        except CmdError as e:
            return StepResult.warning(name, str(e)).log(self.logger)
        return StepResult(name=name).log(self.logger)

# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/apt.py
"""
apt-get wrapper.

Every call runs non-interactively with -y. A failing call is reported as a
WARNING StepResult and the run continues; with strict=True it raises
PackageError instead. For a root other than / the commands run under
`chroot <root>`.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from ..core.exceptions import PackageError
from ..core.logger import Log
from ..core.steps import StepResult
from ..core.utils import CmdError, U

APT_GET = "apt-get"


class PackageManager:
    def __init__(
        self,
        logger: logging.Logger,
        *,
        root: Union[str, Path] = "/",
        dry_run: bool = False,
        strict: bool = False,
        timeout: int = 3600,
    ):
        self.logger = logger
        self.root = root
        self.dry_run = dry_run
        self.strict = strict
        self.timeout = timeout

    @staticmethod
    def _env() -> Dict[str, str]:
        env = dict(os.environ)
        env["DEBIAN_FRONTEND"] = "noninteractive"
        return env

    def _apt(self, name: str, args: List[str], *, tolerate: bool = False) -> StepResult:
        cmd = U.in_root(self.root, [APT_GET, *args, "-y"])
        if self.dry_run:
            return StepResult.skipped(name, f"dry-run: {U._pretty_cmd(cmd)}").log(self.logger)

        Log.step(self.logger, name)
        try:
            U.run_cmd(self.logger, cmd, env=self._env(), timeout=self.timeout, stream=True)
        except CmdError as e:
            detail = f"{U._pretty_cmd(cmd)} failed: {e}"
            if self.strict and not tolerate:
                raise PackageError(code=1, msg=detail, cause=e)
            return StepResult.warning(name, detail).log(self.logger)
        return StepResult(name=name).log(self.logger)

    def update(self) -> StepResult:
        return self._apt("apt-get update", ["update"])

    def full_upgrade(self) -> StepResult:
        return self._apt("apt-get full-upgrade", ["full-upgrade"])

    def install(self, *packages: str, tolerate: bool = False) -> StepResult:
        """tolerate=True keeps the failure a warning even in strict mode."""
        return self._apt(f"install {' '.join(packages)}", ["install", *packages], tolerate=tolerate)

    def remove(self, *packages: str) -> StepResult:
        return self._apt(f"remove {' '.join(packages)}", ["remove", *packages], tolerate=True)

    def fix_broken(self) -> StepResult:
        return self._apt("apt-get -f install", ["-f", "install"])

# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/sysctl.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from ..core.file_ops import atomic_write_text
from ..core.steps import StepResult
from ..core.utils import CmdError, U

SYSCTL_CONF = "/etc/sysctl.d/99-proxmox-ipforward.conf"
SYSCTL_BIN = "/usr/sbin/sysctl"

FORWARDING_CONF = """\
net.ipv4.ip_forward=1
net.ipv6.conf.all.forwarding=1
"""


class SysctlForwarding:
    def __init__(self, logger: logging.Logger, *, root: Union[str, Path] = "/", dry_run: bool = False):
        self.logger = logger
        self.path = U.under_root(root, SYSCTL_CONF)
        self.dry_run = dry_run
        # the kernel settings belong to the running system, not to root
        self.live = U.is_live_root(root)

    def write(self) -> StepResult:
        name = "write forwarding sysctl"
        if self.dry_run:
            return StepResult.skipped(name).log(self.logger)
        atomic_write_text(self.path, FORWARDING_CONF, mode=0o644)
        return StepResult(name=name, detail=str(self.path)).log(self.logger)

    def reload(self) -> StepResult:
        name = "sysctl --system"
        if self.dry_run:
            return StepResult.skipped(name).log(self.logger)
        if not self.live:
            return StepResult.skipped(name, "target root is not the running system").log(self.logger)
        try:
            U.run_cmd(self.logger, [SYSCTL_BIN, "--system"], capture=True, timeout=120)
        except CmdError as e:
            return StepResult.warning(name, str(e)).log(self.logger)
        return StepResult(name=name).log(self.logger)

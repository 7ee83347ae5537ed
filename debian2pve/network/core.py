# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/core.py
"""
Bridge rewrite of /etc/network/interfaces.

Pipeline:
1. Backup: copy the live file to <path>.bak.<epoch>
2. Parse: primary interface, aliases, DNS (network.parser)
3. Render: loopback + manual primary + bridge + alias stanzas (network.emitter)
4. Validation: refuse to write a file that would leave the host unreachable
5. Apply: atomic replace (unless dry_run)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import Fatal
from ..core.file_ops import atomic_write_text, backup_copy
from ..core.logger import Log
from ..core.utils import U
from .emitter import render_interfaces
from .model import DEFAULT_BRIDGE, ParsedInterfaces
from .parser import parse_interfaces
from .validation import NetworkValidation

INTERFACES_PATH = "/etc/network/interfaces"


@dataclass
class RewritePlan:
    parsed: ParsedInterfaces
    old_content: str
    new_content: str
    backup_path: Optional[Path] = None
    written: bool = False


class BridgeRewriter:
    """
    Moves the primary interface's address onto a bridge device.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        interfaces_path: Path = Path(INTERFACES_PATH),
        bridge: str = DEFAULT_BRIDGE,
        dry_run: bool = False,
        reset_on_any_iface: bool = False,
    ):
        self.logger = logger
        self.interfaces_path = Path(interfaces_path)
        self.bridge = bridge
        self.dry_run = dry_run
        self.reset_on_any_iface = reset_on_any_iface
        self.validation = NetworkValidation(logger=logger)

    def _require_file(self) -> None:
        if not self.interfaces_path.is_file():
            raise Fatal(code=1, msg=f"Interfaces file not found: {self.interfaces_path}")

    def _read(self) -> str:
        self._require_file()
        return self.interfaces_path.read_text(encoding="utf-8")

    def backup(self) -> Path:
        self._require_file()
        dst = backup_copy(self.interfaces_path, U.now_epoch())
        Log.ok(self.logger, "Backed up interfaces", backup=str(dst))
        return dst

    def plan(self) -> RewritePlan:
        old = self._read()
        parsed = parse_interfaces(old, reset_on_any_iface=self.reset_on_any_iface, logger=self.logger)
        for w in parsed.warnings:
            Log.warn(self.logger, w)

        new = render_interfaces(parsed, bridge=self.bridge, logger=self.logger)
        self.logger.info(
            "Primary %s (%s) -> bridge %s, %d alias(es)",
            parsed.primary.iface,
            parsed.primary.address,
            self.bridge,
            len(parsed.aliases),
        )
        return RewritePlan(parsed=parsed, old_content=old, new_content=new)

    def apply(self) -> RewritePlan:
        backup_path = None if self.dry_run else self.backup()

        plan = self.plan()
        plan.backup_path = backup_path

        errors = self.validation.validate_rewrite(plan.new_content, plan.parsed, self.bridge)
        if errors:
            raise Fatal(code=1, msg="Refusing to write interfaces: " + "; ".join(errors)).with_context(
                path=str(self.interfaces_path)
            )

        if self.dry_run:
            self.logger.info("DRY-RUN: would rewrite %s", self.interfaces_path)
            return plan

        atomic_write_text(self.interfaces_path, plan.new_content)
        plan.written = True
        Log.ok(self.logger, "Rewrote interfaces", path=str(self.interfaces_path), bridge=self.bridge)
        return plan

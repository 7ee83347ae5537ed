# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/orchestrator/orchestrator.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.logger import Log
from ..core.steps import StepResult, StepStatus, summarize
from ..core.utils import U
from ..host.apt import PackageManager
from ..host.distro import OS_RELEASE_PATH, SUPPORTED_CODENAMES, DistroInfo, detect_distro
from ..host.postfix import MAIN_CF, PostfixPatcher
from ..host.reboot import Rebooter
from ..host.repository import DEFAULT_KEY_URL, DEFAULT_MIRROR, ProxmoxRepository, remove_enterprise_list
from ..host.sysctl import SysctlForwarding
from ..network.core import INTERFACES_PATH, BridgeRewriter, RewritePlan
from ..network.model import DEFAULT_BRIDGE
from .summary import print_summary

PREP_PACKAGES = ("postfix", "open-iscsi", "chrony", "ifupdown2")
HYPERVISOR_PACKAGE = "proxmox-ve"
BOOT_PROBER_PACKAGE = "os-prober"


class Orchestrator:
    """
    Main provisioning pipeline.

    Stage 1 (host preparation) and stage 2 (network reconfiguration) share
    nothing but the filesystem below `root`. Fatal conditions propagate as
    exceptions; every other step leaves a StepResult in self.results.
    """

    def __init__(self, logger: logging.Logger, args: argparse.Namespace):
        self.logger = logger
        self.args = args
        self.results: List[StepResult] = []
        self.distro: Optional[DistroInfo] = None
        self.plan: Optional[RewritePlan] = None

        self.root = Path(getattr(args, "root", None) or "/")
        self.live = U.is_live_root(self.root)
        self.dry_run = bool(getattr(args, "dry_run", False))

        Log.trace(self.logger, "🧠 Orchestrator init: root=%s dry_run=%s", self.root, self.dry_run)

    def _path(self, host_path: str) -> Path:
        return U.under_root(self.root, host_path)

    def _record(self, result: StepResult) -> StepResult:
        self.results.append(result)
        return result

    # ---------------------------
    # Stage 1: host preparation
    # ---------------------------

    def prepare_host(self) -> None:
        args = self.args
        Log.banner(self.logger, "Host preparation")

        postfix = PostfixPatcher(self.logger, self._path(MAIN_CF), dry_run=self.dry_run, live=self.live)
        self._record(postfix.patch())
        self._record(remove_enterprise_list(self.logger, root=self.root, dry_run=self.dry_run))

        supported: Sequence[str] = getattr(args, "supported_codenames", None) or SUPPORTED_CODENAMES
        self.distro = detect_distro(self.logger, self._path(OS_RELEASE_PATH), supported=supported)

        apt = PackageManager(
            self.logger,
            root=self.root,
            dry_run=self.dry_run,
            strict=bool(getattr(args, "strict_packages", False)),
        )
        self._record(apt.update())
        self._record(apt.full_upgrade())

        # Fails once on hosts whose hostname postfix rejects; fixed up below.
        extra = list(getattr(args, "extra_packages", None) or [])
        self._record(apt.install(*PREP_PACKAGES, *extra, tolerate=True))

        self._record(postfix.patch())
        self._record(postfix.reload())
        self._record(apt.fix_broken())

        repo = ProxmoxRepository(
            self.logger,
            self.distro.codename,
            root=self.root,
            mirror=getattr(args, "pve_mirror", None) or DEFAULT_MIRROR,
            key_url_template=getattr(args, "key_url_template", None) or DEFAULT_KEY_URL,
            dry_run=self.dry_run,
        )
        self._record(repo.write_repo_list())
        self._record(repo.install_signing_key())
        self._record(apt.update())
        self._record(apt.install(HYPERVISOR_PACKAGE))

        if not getattr(args, "keep_os_prober", False):
            self._record(apt.remove(BOOT_PROBER_PACKAGE))

    # ---------------------------
    # Stage 2: network reconfiguration
    # ---------------------------

    def reconfigure_network(self) -> RewritePlan:
        args = self.args
        Log.banner(self.logger, "Network reconfiguration")

        rewriter = BridgeRewriter(
            self.logger,
            interfaces_path=self._path(getattr(args, "interfaces", None) or INTERFACES_PATH),
            bridge=getattr(args, "bridge", None) or DEFAULT_BRIDGE,
            dry_run=self.dry_run,
            reset_on_any_iface=bool(getattr(args, "reset_on_any_iface", False)),
        )
        self.plan = rewriter.apply()
        self._record(
            StepResult(
                name="rewrite interfaces",
                detail=f"backup={self.plan.backup_path}" if self.plan.backup_path else "dry-run",
            )
        )

        if getattr(args, "print_interfaces", False) or self.dry_run:
            sys.stdout.write(self.plan.new_content)
            sys.stdout.flush()

        sysctl = SysctlForwarding(self.logger, root=self.root, dry_run=self.dry_run)
        self._record(sysctl.write())
        self._record(sysctl.reload())
        return self.plan

    def _log_summary(self) -> None:
        counts = summarize(self.results)
        self.logger.info(
            "Summary: %d ok, %d warning(s), %d skipped",
            counts["ok"],
            counts["warning"],
            counts["skipped"],
        )
        for r in self.results:
            if r.status is StepStatus.WARNING:
                self.logger.info("  ⚠️  %s: %s", r.name, r.detail)
        if not getattr(self.args, "quiet", 0) and not getattr(self.args, "json_logs", False):
            print_summary(self.results)

    def run(self) -> int:
        args = self.args
        network_only = bool(getattr(args, "network_only", False))
        skip_network = bool(getattr(args, "skip_network", False))

        # a chroot target still needs root for chroot(8) and its apt-get runs
        U.require_root_if_needed(self.logger, write_actions=not self.dry_run and (self.live or not network_only))

        if not network_only:
            self.prepare_host()

        rebooter: Optional[Rebooter] = None
        if not skip_network:
            self.reconfigure_network()
            rebooter = Rebooter(
                self.logger,
                delay_s=float(getattr(args, "reboot_delay", 5.0)),
                enabled=not getattr(args, "no_reboot", False),
                dry_run=self.dry_run,
                live=self.live,
            )
            self._record(rebooter.pending())

        self._log_summary()

        if rebooter is not None and rebooter.skip_reason() is None:
            rebooter.reboot()

        return 0

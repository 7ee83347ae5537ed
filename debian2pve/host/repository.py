# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/repository.py
"""
Proxmox VE apt repository switch:

  - drop sources.list.d/pve-enterprise.list (needs a subscription)
  - write sources.list.d/pve-install-repo.list (no-subscription)
  - fetch the release signing key into trusted.gpg.d

The key is fetched as-is; no signature verification happens here.
"""
from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional, Union

import requests

from ..core.file_ops import atomic_write, atomic_write_text, safe_unlink
from ..core.retry import retry_operation
from ..core.steps import StepResult
from ..core.utils import U

ENTERPRISE_LIST = "/etc/apt/sources.list.d/pve-enterprise.list"
INSTALL_LIST = "/etc/apt/sources.list.d/pve-install-repo.list"
TRUSTED_DIR = "/etc/apt/trusted.gpg.d"

DEFAULT_MIRROR = "http://download.proxmox.com/debian/pve"
DEFAULT_KEY_URL = "https://enterprise.proxmox.com/debian/proxmox-release-{codename}.gpg"

REPO_LINE = "deb [arch=amd64] {mirror} {codename} pve-no-subscription\n"


def render_repo_list(codename: str, mirror: str = DEFAULT_MIRROR) -> str:
    return REPO_LINE.format(mirror=mirror.rstrip("/"), codename=codename)


def remove_enterprise_list(logger: logging.Logger, *, root: Union[str, Path] = "/", dry_run: bool = False) -> StepResult:
    name = "remove pve-enterprise.list"
    if dry_run:
        return StepResult.skipped(name).log(logger)
    try:
        removed = safe_unlink(U.under_root(root, ENTERPRISE_LIST))
    except OSError as e:
        return StepResult.warning(name, str(e)).log(logger)
    return StepResult(name=name, detail="removed" if removed else "not present").log(logger)


class ProxmoxRepository:
    def __init__(
        self,
        logger: logging.Logger,
        codename: str,
        *,
        root: Union[str, Path] = "/",
        mirror: str = DEFAULT_MIRROR,
        key_url_template: str = DEFAULT_KEY_URL,
        dry_run: bool = False,
        timeout: float = 30.0,
        max_attempts: int = 3,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.logger = logger
        self.codename = codename
        self.root = Path(root)
        self.mirror = mirror
        self.key_url_template = key_url_template
        self.dry_run = dry_run
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._sleep = sleep or time.sleep

    @property
    def install_list(self) -> Path:
        return U.under_root(self.root, INSTALL_LIST)

    @property
    def key_url(self) -> str:
        return self.key_url_template.format(codename=self.codename)

    @property
    def key_path(self) -> Path:
        return U.under_root(self.root, f"{TRUSTED_DIR}/proxmox-release-{self.codename}.gpg")

    def write_repo_list(self) -> StepResult:
        name = "write pve-install-repo.list"
        content = render_repo_list(self.codename, self.mirror)
        if self.dry_run:
            return StepResult.skipped(name, f"dry-run: {content.strip()}").log(self.logger)
        atomic_write_text(self.install_list, content, mode=0o644)
        return StepResult(name=name, detail=str(self.install_list)).log(self.logger)

    def _fetch_key(self) -> bytes:
        resp = requests.get(self.key_url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content

    def install_signing_key(self) -> StepResult:
        name = "install proxmox release key"
        if self.dry_run:
            return StepResult.skipped(name, f"dry-run: {self.key_url}").log(self.logger)

        try:
            data = retry_operation(
                self._fetch_key,
                max_attempts=self.max_attempts,
                base_backoff_s=1.0,
                exceptions=requests.RequestException,
                operation_name=f"GET {self.key_url}",
                logger=self.logger,
                sleep=self._sleep,
            )
        except requests.RequestException as e:
            return StepResult.warning(name, f"{self.key_url}: {e}").log(self.logger)

        try:
            with atomic_write(self.key_path) as tmp:
                tmp.write_bytes(data)
                # must be world-readable for _apt
                os.chmod(tmp, 0o644)
        except OSError as e:
            return StepResult.warning(name, f"{self.key_path}: {e}").log(self.logger)

        return StepResult(name=name, detail=f"{self.key_path} ({len(data)} bytes)").log(self.logger)

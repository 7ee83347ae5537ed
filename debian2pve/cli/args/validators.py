# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/cli/args/validators.py
from __future__ import annotations

import argparse
import os
import re
from typing import Any, Dict

# Linux IFNAMSIZ is 16 including the trailing NUL.
_IFNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]{1,15}$")


def _present(v: Any) -> bool:
    return v is not None and (not isinstance(v, str) or v.strip() != "")


def _merged_get(args: argparse.Namespace, conf: Dict[str, Any], key: str) -> Any:
    """CLI value if given, else the merged config value."""
    v = getattr(args, key, None)
    return v if _present(v) else conf.get(key)


def _validate_bridge(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    bridge = _merged_get(args, conf, "bridge")
    if not _present(bridge) or not _IFNAME_RE.match(str(bridge)):
        raise SystemExit(f"--bridge must be a valid interface name (max 15 chars), got: {bridge!r}")


def _validate_root(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    root = _merged_get(args, conf, "root") or "/"
    if not os.path.isdir(str(root)):
        raise SystemExit(f"--root directory not found: {root}")


def _validate_stage_selection(args: argparse.Namespace) -> None:
    if getattr(args, "network_only", False) and getattr(args, "skip_network", False):
        raise SystemExit("--network-only and --skip-network together leave nothing to do")


def _validate_reboot_delay(args: argparse.Namespace) -> None:
    delay = getattr(args, "reboot_delay", 5.0)
    try:
        ok = float(delay) >= 0
    except (TypeError, ValueError):
        ok = False
    if not ok:
        raise SystemExit(f"--reboot-delay must be a non-negative number, got: {delay!r}")


def _validate_codenames(args: argparse.Namespace) -> None:
    names = getattr(args, "supported_codenames", None)
    if names is None:
        return
    if isinstance(names, str) or not all(_present(n) for n in names):
        raise SystemExit(f"supported_codenames must be a list of non-empty names, got: {names!r}")


def _validate_key_url(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    tpl = _merged_get(args, conf, "key_url_template")
    if _present(tpl) and "{codename}" not in str(tpl):
        raise SystemExit(f"--key-url-template must contain {{codename}}, got: {tpl}")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    _validate_stage_selection(args)
    _validate_root(args, conf)
    _validate_bridge(args, conf)
    _validate_reboot_delay(args)
    _validate_codenames(args)
    _validate_key_url(args, conf)

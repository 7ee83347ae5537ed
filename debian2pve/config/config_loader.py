# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/config/config_loader.py
"""
YAML/JSON config files, merged in order and applied as argparse defaults so
that explicit CLI flags always win.

Keys are argparse dests (snake_case). Dashed keys are accepted and
normalized: `reboot-delay: 10` == `reboot_delay: 10`.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.utils import U


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, configs: List[str]) -> List[Path]:
        """
        Expand ~, env vars and globs; keep order, drop duplicates.
        Missing files are fatal.
        """
        out: List[Path] = []
        seen = set()
        for raw in configs:
            pattern = os.path.expandvars(os.path.expanduser(str(raw)))
            matches = sorted(glob.glob(pattern)) if glob.has_magic(pattern) else [pattern]
            if not matches:
                U.die(logger, f"Config glob matched nothing: {raw}", 1)
            for m in matches:
                p = Path(m).resolve()
                if not p.is_file():
                    U.die(logger, f"Config file not found: {raw}", 1)
                if p in seen:
                    continue
                seen.add(p)
                out.append(p)
        logger.debug("Config files: %s", [str(p) for p in out])
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            U.die(logger, f"Invalid config {path}: {e}", 1)

        if not isinstance(data, dict):
            U.die(logger, f"Config {path} must be a mapping at top level, got {type(data).__name__}", 1)
        return {str(k).replace("-", "_"): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: List[Path]) -> Dict[str, Any]:
        """Shallow merge: later files override earlier ones key by key."""
        merged: Dict[str, Any] = {}
        for p in paths:
            data = Config.load_one(logger, p)
            logger.debug("Loaded %d key(s) from %s", len(data), p)
            merged.update(data)
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        known = {a.dest for a in parser._actions}
        defaults = {k: v for k, v in conf.items() if k in known}
        unknown = sorted(k for k in conf if k not in known)
        if unknown:
            logger.warning("Ignoring unknown config key(s): %s", ", ".join(unknown))
        if defaults:
            parser.set_defaults(**defaults)
            logger.debug("Applied config defaults: %s", sorted(defaults))

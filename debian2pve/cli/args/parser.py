# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/cli/args/parser.py
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...core.logger import Log, c
from ...core.utils import U
from ..help_texts import FEATURE_SUMMARY, YAML_EXAMPLE
from .groups import (
    _add_global_config_logging,
    _add_global_operation_flags,
    _add_host_preparation,
    _add_network,
)
from .validators import validate_args

_LOGGING_KEYS = ("verbose", "quiet", "log_file", "json_logs")


class _HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    pass


def _epilog() -> str:
    return (
        c("Config file (YAML):\n", "cyan", ["bold"])
        + YAML_EXAMPLE
        + "\n"
        + c("What it does:\n", "cyan", ["bold"])
        + FEATURE_SUMMARY
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="debian2pve",
        description=c("debian2pve: Debian host → Proxmox VE node (packages + vmbr0 bridge)", "green", ["bold"]),
        formatter_class=_HelpFormatter,
        epilog=_epilog(),
    )

    _add_global_config_logging(p)
    _add_global_operation_flags(p)
    _add_host_preparation(p)
    _add_network(p)

    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """
    Flow:
      Phase 0: parse ONLY global flags needed to locate config/logging
      Phase 1: load+merge config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse to get final args
      Phase 4: validate using merged config + args

    Returns: (args, merged_config_dict, logger)
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    pre = _build_preparser()
    args0, _rest = pre.parse_known_args(argv)

    own_logger = logger is None
    if own_logger:
        logger = Log.setup(args0.verbose, args0.log_file, quiet=args0.quiet, json_logs=args0.json_logs)

    conf = _load_merged_config(logger, args0.config or [])

    if args0.dump_config:
        print(U.json_dump(conf))
        raise SystemExit(0)

    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)

    if args0.dump_args:
        print(U.json_dump(vars(args)))
        raise SystemExit(0)

    validate_args(args, conf)

    # Config files may carry logging settings the pre-parser could not see.
    if own_logger and any(getattr(args, k) != getattr(args0, k) for k in _LOGGING_KEYS):
        logger = Log.setup(args.verbose, args.log_file, quiet=args.quiet, json_logs=args.json_logs)

    return args, conf, logger

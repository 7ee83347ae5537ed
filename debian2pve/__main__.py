# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/__main__.py
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli.args import parse_args_with_config
from .core.exceptions import Fatal, format_exception_for_cli
from .orchestrator import Orchestrator


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    """
    Log via `logger` if we have one, else stderr.
    """
    if logger is None:
        _print_stderr(msg)
        return
    getattr(logger, level)(msg)


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = None

    # Phase 1: parse (Fatal can happen here)
    try:
        args, _conf, logger = parse_args_with_config(argv)
    except Fatal as e:
        # config errors are already logged by U.die()
        raise SystemExit(e.code)
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: run pipeline
    try:
        rc = Orchestrator(logger, args).run()
    except Fatal as e:
        _safe_log(logger, "error", format_exception_for_cli(e, verbose=args.verbose))
        rc = e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        # Unexpected exceptions must not fail silently.
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()

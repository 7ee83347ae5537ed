# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/core/utils.py
from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import Fatal

CmdError = (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError)


class U:
    @staticmethod
    def die(logger: logging.Logger, msg: str, code: int = 1) -> None:
        logger.error(msg)
        raise Fatal(code, msg)

    @staticmethod
    def now_epoch() -> int:
        return int(time.time())

    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def under_root(root: Union[str, Path], path: Union[str, Path]) -> Path:
        """
        Re-anchor an absolute host path below `root`.

        under_root("/", "/etc/network/interfaces") -> /etc/network/interfaces
        under_root("/mnt/target", "/etc/hosts")    -> /mnt/target/etc/hosts
        """
        return Path(root) / str(path).lstrip("/")

    @staticmethod
    def is_live_root(root: Union[str, Path]) -> bool:
        """True when `root` is the running system rather than a chroot or test tree."""
        return Path(root).resolve() == Path("/")

    @staticmethod
    def in_root(root: Union[str, Path], cmd: List[str]) -> List[str]:
        """Prefix `cmd` with `chroot <root>` unless root is the running system."""
        if U.is_live_root(root):
            return list(cmd)
        return ["chroot", str(root), *cmd]

    @staticmethod
    def _pretty_cmd(cmd: List[str]) -> str:
        return " ".join(shlex.quote(x) for x in cmd)

    @staticmethod
    def _stream(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool,
        env: Optional[Dict[str, str]],
        timeout: Optional[int],
    ) -> subprocess.CompletedProcess:
        # stdout+stderr merged and echoed line by line; apt runs take minutes
        expired = threading.Event()
        lines: List[str] = []
        with subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, env=env) as proc:
            assert proc.stdout is not None

            def _expire() -> None:
                expired.set()
                proc.kill()

            # the read loop blocks until EOF, so the deadline kills the child to end it
            timer = threading.Timer(timeout, _expire) if timeout else None
            if timer is not None:
                timer.daemon = True
                timer.start()
            try:
                for line in proc.stdout:
                    line = line.rstrip("\n")
                    lines.append(line)
                    logger.info(line)
                rc = proc.wait()
            finally:
                if timer is not None:
                    timer.cancel()
        out = "\n".join(lines)
        if expired.is_set():
            raise subprocess.TimeoutExpired(cmd, timeout, output=out)
        if check and rc != 0:
            raise subprocess.CalledProcessError(rc, cmd, output=out)
        return subprocess.CompletedProcess(cmd, rc, stdout=out, stderr="")

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool = True,
        capture: bool = False,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
        stream: bool = False,
        fatal: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run a command, logging failures.

        stream=True echoes merged output to the logger as it arrives.
        fatal=True turns any failure into Fatal; otherwise the subprocess /
        OS exception propagates for the caller to classify.
        """
        pretty = U._pretty_cmd(cmd)
        logger.debug("Running: %s", pretty)

        try:
            if stream:
                return U._stream(logger, cmd, check=check, env=env, timeout=timeout)
            return subprocess.run(cmd, check=check, capture_output=capture, text=True, env=env, timeout=timeout)

        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            logger.error("Command failed (rc=%s): %s%s", e.returncode, pretty, f"\n{stderr}" if stderr else "")
            if fatal:
                raise Fatal(e.returncode or 1, f"Command failed: {pretty}") from e
            raise

        except subprocess.TimeoutExpired as e:
            logger.error("Command timed out after %ss: %s", timeout, pretty)
            if fatal:
                raise Fatal(124, f"Command timed out: {pretty}") from e
            raise

        except OSError as e:
            logger.error("Cannot run %s: %s", pretty, e)
            if fatal:
                raise Fatal(1, f"Cannot run {pretty}: {e}") from e
            raise

    @staticmethod
    def require_root_if_needed(logger: logging.Logger, write_actions: bool) -> None:
        if write_actions and os.geteuid() != 0:
            U.die(logger, "This operation requires root. Re-run with sudo.", 1)

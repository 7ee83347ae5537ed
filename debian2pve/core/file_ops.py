# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/core/file_ops.py
"""
File helpers for rewriting host configuration in place.

atomic_write_text() never leaves a half-written config behind: content goes
to a temporary sibling first and is renamed over the target.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional


@contextmanager
def atomic_write(
    target_path: Path,
    *,
    suffix: str = ".part",
    delete_on_error: bool = True,
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    Creates a temporary file next to the target, yields its path for writing,
    then renames it over the target on success. Cleans up the temp file on
    failure.

    Example:
        with atomic_write(Path("/etc/network/interfaces")) as tmp:
            tmp.write_text(new_content, encoding="utf-8")
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(target_path.parent),
    )
    temp_path = Path(temp_name)

    try:
        os.close(fd)
        if target_path.exists():
            shutil.copymode(target_path, temp_path)
        else:
            os.chmod(temp_path, 0o644)
        yield temp_path
        os.replace(temp_path, target_path)

    except BaseException:
        if delete_on_error:
            temp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(target_path: Path, content: str, *, mode: Optional[int] = None) -> None:
    with atomic_write(target_path) as tmp:
        tmp.write_text(content, encoding="utf-8")
        if mode is not None:
            os.chmod(tmp, mode)


def backup_copy(path: Path, stamp: int) -> Path:
    """
    Copy `path` to `<path>.bak.<stamp>` preserving mode/timestamps.

    Returns the backup path.
    """
    path = Path(path)
    dst = path.with_name(f"{path.name}.bak.{stamp}")
    shutil.copy2(path, dst)
    return dst


def safe_unlink(path: Path, missing_ok: bool = True) -> bool:
    """
    Delete a file. Returns True if something was removed.
    """
    p = Path(path)
    if not p.exists() and missing_ok:
        return False
    p.unlink()
    return True

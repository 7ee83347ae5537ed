# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/distro.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence

from ..core.exceptions import UnsupportedDistroError

OS_RELEASE_PATH = "/etc/os-release"
EXPECTED_ID = "debian"
SUPPORTED_CODENAMES = ("bullseye", "bookworm")


@dataclass(frozen=True)
class DistroInfo:
    id: str
    codename: str
    pretty_name: str = ""


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in (text or "").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip().strip('"').strip("'")
    return out


def detect_distro(
    logger: logging.Logger,
    os_release: Path = Path(OS_RELEASE_PATH),
    *,
    supported: Sequence[str] = SUPPORTED_CODENAMES,
) -> DistroInfo:
    """
    Read os-release and insist on a supported Debian release.

    Missing file, a non-Debian ID, or an unsupported VERSION_CODENAME raise
    UnsupportedDistroError.
    """
    if not os_release.is_file():
        raise UnsupportedDistroError(code=1, msg=f"Missing {os_release}. Aborting.")

    fields = parse_os_release(os_release.read_text(encoding="utf-8", errors="replace"))
    distro_id = fields.get("ID", "")
    codename = fields.get("VERSION_CODENAME", "")

    if distro_id != EXPECTED_ID:
        raise UnsupportedDistroError(code=1, msg="Not Debian. Aborting.").with_context(id=distro_id)

    if codename not in supported:
        raise UnsupportedDistroError(code=1, msg=f"Unsupported: {codename or '<none>'}").with_context(
            supported=",".join(supported)
        )

    info = DistroInfo(id=distro_id, codename=codename, pretty_name=fields.get("PRETTY_NAME", ""))
    logger.info("Detected %s (%s)", info.pretty_name or info.id, info.codename)
    return info

# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/prefix.py
from __future__ import annotations

import logging
import re
from typing import Optional

from ..core.exceptions import InvalidNetmaskError

_CIDR_RE = re.compile(r"^\d+\.\d+\.\d+\.\d+/(\d+)$")

_default_logger = logging.getLogger("debian2pve.network")


def inline_prefix(address: str) -> Optional[int]:
    """Prefix length of an `a.b.c.d/N` address, None for anything else."""
    m = _CIDR_RE.match(address.strip())
    return int(m.group(1)) if m else None


def netmask_to_prefix(netmask: str) -> int:
    """
    Count the set bits of a dotted-quad netmask.

    Every octet is rendered as 8-bit binary on its own; the bits are not
    required to be contiguous.
    """
    octets = netmask.strip().split(".")
    if len(octets) != 4:
        raise InvalidNetmaskError(msg=f"Invalid netmask: {netmask!r}")

    bits = ""
    for o in octets:
        if not o.isdigit() or int(o) > 255:
            raise InvalidNetmaskError(msg=f"Invalid netmask: {netmask!r}")
        bits += format(int(o), "08b")
    return bits.count("1")


def normalize_address(
    address: str,
    netmask: Optional[str] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Make sure the address carries a CIDR prefix.

      - `a.b.c.d/N` passes through (an inline prefix wins over a netmask; a
        disagreement is logged)
      - otherwise `/<prefix>` derived from the netmask is appended
      - with neither, the address is returned bare
    """
    log = logger or _default_logger
    address = address.strip()

    prefix = inline_prefix(address)
    if prefix is not None:
        if netmask:
            try:
                derived = netmask_to_prefix(netmask)
            except InvalidNetmaskError as e:
                log.warning("Ignoring netmask for %s: %s", address, e)
            else:
                if derived != prefix:
                    log.warning(
                        "Address %s has inline prefix /%d but netmask %s means /%d; keeping /%d",
                        address, prefix, netmask, derived, prefix,
                    )
        return address

    if not netmask:
        log.warning("No prefix or netmask for %s; emitting it without a prefix", address)
        return address

    try:
        return f"{address}/{netmask_to_prefix(netmask)}"
    except InvalidNetmaskError as e:
        log.warning("%s; emitting %s without a prefix", e, address)
        return address

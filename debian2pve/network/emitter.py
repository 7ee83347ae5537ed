# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/emitter.py
"""
Render the replacement /etc/network/interfaces.

Layout (one stanza per paragraph):

    auto lo
    iface lo inet loopback

    auto eth0
    iface eth0 inet manual

    auto vmbr0
    iface vmbr0 inet static
        address 10.0.0.5/24
        gateway 10.0.0.1
        bridge-ports eth0
        bridge-stp off
        bridge-fd 0

followed by one stanza per alias, ordered by (iface, ip).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .model import DEFAULT_BRIDGE, ParsedInterfaces
from .prefix import normalize_address

INDENT = "    "


def _stanza(header: List[str], attrs: List[str]) -> str:
    return "\n".join(header + [INDENT + a for a in attrs])


def _alias_stanzas(parsed: ParsedInterfaces) -> List[str]:
    netmask = parsed.primary.netmask
    out: List[str] = []
    for (iface, _ip), addr in parsed.sorted_aliases():
        if "/" in addr:
            out.append(_stanza([f"iface {iface} inet static"], [f"address {addr}"]))
        elif netmask:
            # The alias's own netmask is never captured; the primary's is reused.
            out.append(_stanza([f"iface {iface} inet static"], [f"address {addr}", f"netmask {netmask}"]))
        else:
            out.append(f"# WARNING: No netmask for {iface} ({addr})")
    return out


def render_interfaces(
    parsed: ParsedInterfaces,
    *,
    bridge: str = DEFAULT_BRIDGE,
    logger: Optional[logging.Logger] = None,
) -> str:
    primary = parsed.primary
    address = normalize_address(primary.address or "", primary.netmask, logger=logger)

    bridge_attrs = [f"address {address}"]
    if primary.gateway:
        bridge_attrs.append(f"gateway {primary.gateway}")
    bridge_attrs += [
        f"bridge-ports {primary.iface}",
        "bridge-stp off",
        "bridge-fd 0",
    ]
    if parsed.dns.nameservers:
        bridge_attrs.append(f"dns-nameservers {parsed.dns.nameservers}")
    if parsed.dns.search:
        bridge_attrs.append(f"dns-search {parsed.dns.search}")

    stanzas = [
        _stanza(["auto lo", "iface lo inet loopback"], []),
        _stanza([f"auto {primary.iface}", f"iface {primary.iface} inet manual"], []),
        _stanza([f"auto {bridge}", f"iface {bridge} inet static"], bridge_attrs),
    ]
    stanzas += _alias_stanzas(parsed)

    return "\n\n".join(stanzas) + "\n"

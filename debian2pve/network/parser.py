# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/parser.py
"""
Single-pass parser for Debian's /etc/network/interfaces.

Only what the bridge rewrite needs is extracted:

  - the primary interface: first `inet static` stanza that carries an address,
    with its first address, netmask and gateway (first occurrence wins)
  - aliases: every other address line, keyed by (iface, bare ip)
  - dns-nameservers / dns-search: global, last occurrence wins

The "current interface" cursor moves only on `iface <name> inet static`
headers. Other headers (dhcp, manual, inet6 ...) leave it where it was unless
reset_on_any_iface=True, so attribute lines that follow a non-static stanza
are still attributed to the last static interface seen.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..core.exceptions import NoPrimaryInterfaceError
from .model import (
    AliasBinding,
    DnsSettings,
    InterfaceBlock,
    ParsedInterfaces,
    PrimaryConfig,
    bare_ip,
)

_IFACE_RE = re.compile(r"^iface\s+(\S+)\s+(\S+)\s+(\S+)")

ADDRESS = "address"
NETMASK = "netmask"
GATEWAY = "gateway"
DNS_NAMESERVERS = "dns-nameservers"
DNS_SEARCH = "dns-search"

_IFACE_SCOPED = (ADDRESS, NETMASK, GATEWAY)

_default_logger = logging.getLogger("debian2pve.network")


def _split_directive(line: str) -> Optional[tuple[str, str]]:
    parts = line.split(None, 1)
    if len(parts) != 2:
        return None
    return parts[0], parts[1].strip()


def parse_interfaces(
    text: str,
    *,
    reset_on_any_iface: bool = False,
    logger: Optional[logging.Logger] = None,
) -> ParsedInterfaces:
    """
    Parse interfaces text into ParsedInterfaces.

    Raises NoPrimaryInterfaceError when no `inet static` interface with an
    address exists; there is no bridge target in that case.
    """
    log = logger or _default_logger

    primary: Optional[PrimaryConfig] = None
    aliases: AliasBinding = {}
    dns = DnsSettings()
    blocks: List[InterfaceBlock] = []
    warnings: List[str] = []

    current: Optional[InterfaceBlock] = None
    last_header: Optional[InterfaceBlock] = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.replace(",", "").strip()
        if not line or line.startswith("#"):
            continue

        m = _IFACE_RE.match(line)
        if m:
            block = InterfaceBlock(name=m.group(1), family=m.group(2), method=m.group(3), lineno=lineno)
            blocks.append(block)
            last_header = block
            if block.is_static:
                current = block
            elif reset_on_any_iface:
                current = None
            log.debug("line %d: iface %s %s %s", lineno, block.name, block.family, block.method)
            continue

        kv = _split_directive(line)
        if kv is None:
            continue
        key, value = kv

        if key == DNS_NAMESERVERS:
            dns.nameservers = value
            continue
        if key == DNS_SEARCH:
            dns.search = value
            continue

        if key not in _IFACE_SCOPED or current is None:
            continue

        if last_header is not None and last_header is not current:
            warnings.append(
                f"line {lineno}: '{key} {value}' follows 'iface {last_header.name} "
                f"{last_header.family} {last_header.method}' but is attributed to static interface {current.name}"
            )

        if key == ADDRESS:
            current.addresses.append(value)
            if primary is None:
                # Block becomes primary on its first address; adopt what it already declared.
                primary = PrimaryConfig(
                    iface=current.name,
                    address=value,
                    netmask=current.netmask,
                    gateway=current.gateway,
                )
                log.debug("Primary interface %s address %s (line %d)", current.name, value, lineno)
            else:
                aliases[(current.name, bare_ip(value))] = value
                log.debug("Alias %s on %s (line %d)", value, current.name, lineno)

        elif key == NETMASK:
            if current.netmask is None:
                current.netmask = value
            if primary is not None and primary.iface == current.name and primary.netmask is None:
                primary.netmask = value

        elif key == GATEWAY:
            if current.gateway is None:
                current.gateway = value
            if primary is not None and primary.iface == current.name and primary.gateway is None:
                primary.gateway = value

    if primary is None or not primary.address:
        raise NoPrimaryInterfaceError(
            code=1,
            msg="No primary static interface found",
        ).with_context(stanzas=len(blocks), static=sum(1 for b in blocks if b.is_static))

    return ParsedInterfaces(primary=primary, aliases=aliases, dns=dns, blocks=blocks, warnings=warnings)

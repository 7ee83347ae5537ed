# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/model.py
"""
Data model for the /etc/network/interfaces rewrite.

The parser fills these from a single top-to-bottom pass; the emitter consumes
them. Nothing here is persisted: every run rebuilds the model from the file
currently on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# (interface, address without /prefix)
AliasKey = Tuple[str, str]
AliasBinding = Dict[AliasKey, str]

DEFAULT_BRIDGE = "vmbr0"


def bare_ip(address: str) -> str:
    """'10.0.0.9/28' -> '10.0.0.9'"""
    return address.split("/", 1)[0]


@dataclass
class InterfaceBlock:
    """One `iface <name> <family> <method>` stanza header as seen in the source."""

    name: str
    family: str
    method: str
    lineno: int = 0
    addresses: List[str] = field(default_factory=list)
    netmask: Optional[str] = None
    gateway: Optional[str] = None

    @property
    def is_static(self) -> bool:
        return self.family == "inet" and self.method == "static"


@dataclass
class PrimaryConfig:
    """The first `inet static` interface that carries an address."""

    iface: str
    address: Optional[str] = None
    netmask: Optional[str] = None
    gateway: Optional[str] = None


@dataclass
class DnsSettings:
    """Global to the parse: last occurrence anywhere in the file wins."""

    nameservers: Optional[str] = None
    search: Optional[str] = None


@dataclass
class ParsedInterfaces:
    primary: PrimaryConfig
    aliases: AliasBinding = field(default_factory=dict)
    dns: DnsSettings = field(default_factory=DnsSettings)
    blocks: List[InterfaceBlock] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def sorted_aliases(self) -> List[Tuple[AliasKey, str]]:
        return sorted(self.aliases.items(), key=lambda kv: kv[0])

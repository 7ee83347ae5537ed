# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/__init__.py
"""
/etc/network/interfaces parsing and bridge rewrite.
"""
from .core import BridgeRewriter, RewritePlan
from .emitter import render_interfaces
from .model import AliasBinding, DnsSettings, InterfaceBlock, ParsedInterfaces, PrimaryConfig
from .parser import parse_interfaces
from .prefix import netmask_to_prefix, normalize_address

__all__ = [
    "AliasBinding",
    "BridgeRewriter",
    "DnsSettings",
    "InterfaceBlock",
    "ParsedInterfaces",
    "PrimaryConfig",
    "RewritePlan",
    "netmask_to_prefix",
    "normalize_address",
    "parse_interfaces",
    "render_interfaces",
]

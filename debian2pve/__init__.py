# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/__init__.py
"""
debian2pve - turn a bare Debian host into a Proxmox VE node.

Usage as a library:

    from debian2pve.network import parse_interfaces, render_interfaces

    parsed = parse_interfaces(open("/etc/network/interfaces").read())
    print(render_interfaces(parsed, bridge="vmbr0"))
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

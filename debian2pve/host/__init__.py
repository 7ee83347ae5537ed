# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/host/__init__.py
"""
Host preparation collaborators: apt, postfix, repositories, sysctl, reboot.
"""
from .apt import PackageManager
from .distro import DistroInfo, detect_distro
from .postfix import PostfixPatcher
from .reboot import Rebooter
from .repository import ProxmoxRepository, remove_enterprise_list
from .sysctl import SysctlForwarding

__all__ = [
    "DistroInfo",
    "PackageManager",
    "PostfixPatcher",
    "ProxmoxRepository",
    "Rebooter",
    "SysctlForwarding",
    "detect_distro",
    "remove_enterprise_list",
]

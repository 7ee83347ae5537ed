# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/cli/args/groups.py
from __future__ import annotations

import argparse

from ...host.distro import SUPPORTED_CODENAMES
from ...host.repository import DEFAULT_KEY_URL, DEFAULT_MIRROR
from ...network.core import INTERFACES_PATH
from ...network.model import DEFAULT_BRIDGE


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -vv debug, -vvv trace")
    p.add_argument("-q", "--quiet", action="count", default=0, help="-q warnings only, -qq errors only")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON logs on stderr.")


def _add_global_operation_flags(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global operation flags
    # ------------------------------------------------------------------
    p.add_argument(
        "--root",
        default="/",
        help=(
            "Filesystem root all host paths are resolved under (chroot or test tree). "
            "Below a root other than / apt-get runs via chroot(8), and the postfix reload, "
            "sysctl --system and reboot are skipped."
        ),
    )
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Print the new interfaces file; do not run apt-get or modify anything.",
    )
    p.add_argument(
        "--network-only",
        dest="network_only",
        action="store_true",
        help="Skip host preparation (postfix, repositories, packages).",
    )
    p.add_argument(
        "--skip-network",
        dest="skip_network",
        action="store_true",
        help="Only prepare the host; leave interfaces, sysctl and reboot alone.",
    )


def _add_host_preparation(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Host preparation
    # ------------------------------------------------------------------
    p.add_argument(
        "--strict-packages",
        dest="strict_packages",
        action="store_true",
        help="Abort on any failed apt-get step (default: log a warning and continue).",
    )
    p.add_argument(
        "--extra-package",
        dest="extra_packages",
        action="append",
        default=[],
        help="Additional package installed alongside postfix/open-iscsi/chrony/ifupdown2 (repeatable).",
    )
    p.add_argument(
        "--keep-os-prober",
        dest="keep_os_prober",
        action="store_true",
        help="Do not remove os-prober.",
    )
    p.add_argument(
        "--supported-codename",
        dest="supported_codenames",
        action="append",
        default=None,
        help=f"Accepted Debian VERSION_CODENAME (repeatable; default: {', '.join(SUPPORTED_CODENAMES)}).",
    )
    p.add_argument("--pve-mirror", dest="pve_mirror", default=DEFAULT_MIRROR, help="Proxmox VE apt mirror.")
    p.add_argument(
        "--key-url-template",
        dest="key_url_template",
        default=DEFAULT_KEY_URL,
        help="Release key URL; {codename} is substituted.",
    )


def _add_network(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Network reconfiguration
    # ------------------------------------------------------------------
    p.add_argument("--interfaces", default=INTERFACES_PATH, help="Interfaces file to rewrite (below --root).")
    p.add_argument("--bridge", default=DEFAULT_BRIDGE, help="Name of the bridge that takes over the primary address.")
    p.add_argument(
        "--reset-on-any-iface",
        dest="reset_on_any_iface",
        action="store_true",
        help="End the current static stanza at any iface header (default: only a new static header moves it).",
    )
    p.add_argument(
        "--print-interfaces",
        dest="print_interfaces",
        action="store_true",
        help="Print the rendered interfaces file to stdout.",
    )
    p.add_argument("--no-reboot", dest="no_reboot", action="store_true", help="Do not reboot at the end.")
    p.add_argument(
        "--reboot-delay",
        dest="reboot_delay",
        type=float,
        default=5.0,
        help="Seconds to wait before rebooting.",
    )

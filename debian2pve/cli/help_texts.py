# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/cli/help_texts.py
from __future__ import annotations

# Pure help text for the argparse epilog; keep it copy/paste runnable.

YAML_EXAMPLE = r"""# debian2pve configuration (YAML)
#
# Run:
# sudo debian2pve --config node.yaml
#
# Merge multiple configs (later overrides earlier, CLI overrides both):
# sudo debian2pve --config base.yaml --config node01.yaml --no-reboot
#
bridge: vmbr0
interfaces: /etc/network/interfaces
reboot_delay: 5
no_reboot: false
strict_packages: false # true: any failed apt-get step aborts the run
reset_on_any_iface: false # true: dhcp/manual stanzas end the static block
keep_os_prober: false
extra_packages: [vim, htop]
supported_codenames: [bullseye, bookworm]
# pve_mirror: http://download.proxmox.com/debian/pve
# key_url_template: https://enterprise.proxmox.com/debian/proxmox-release-{codename}.gpg
# verbose: 2
# log_file: /var/log/debian2pve.log
"""

FEATURE_SUMMARY = r"""  • Comments out postfix myhostname (numeric hostnames break the postfix postinst)
  • Switches to the pve-no-subscription repository and installs its release key
  • Installs postfix/open-iscsi/chrony/ifupdown2, then proxmox-ve
  • Moves the primary static address of /etc/network/interfaces onto vmbr0
    (primary becomes a bridge port, aliases kept as their own stanzas)
  • Backs up the old file as interfaces.bak.<epoch>
  • Enables IPv4/IPv6 forwarding, then reboots
  • --dry-run prints the new interfaces file and touches nothing
  • --network-only / --root DIR rewrite a file below DIR without root privileges
"""

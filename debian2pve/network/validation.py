# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/network/validation.py
"""
Sanity checks on a rendered interfaces file before it replaces the live one.

A broken /etc/network/interfaces followed by a reboot leaves the host
unreachable, so the rewriter refuses to write anything these checks reject.
"""
from __future__ import annotations

import logging
import re
from typing import List

from .model import ParsedInterfaces


class NetworkValidation:
    """
    Validates rendered interfaces content:
      - not empty, has the loopback stanza
      - the primary interface is not the bridge itself
      - exactly one bridge stanza whose bridge-ports is the primary interface
      - the primary interface is `inet manual` and carries no address
      - the bridge carries the primary address
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def _live_lines(text: str) -> List[str]:
        return [ln.strip() for ln in text.splitlines() if ln.strip() and not ln.strip().startswith("#")]

    def _stanza_attrs(self, text: str, iface: str, method: str) -> List[str]:
        """Attribute lines of the first `iface <iface> inet <method>` stanza."""
        attrs: List[str] = []
        inside = False
        for ln in self._live_lines(text):
            if ln.startswith(("iface ", "auto ", "allow-", "source", "mapping ")):
                if inside:
                    break
                inside = bool(re.match(rf"^iface\s+{re.escape(iface)}\s+inet\s+{re.escape(method)}\b", ln))
                continue
            if inside:
                attrs.append(ln)
        return attrs

    def validate_rewrite(self, rendered: str, parsed: ParsedInterfaces, bridge: str) -> List[str]:
        """
        Returns:
            List of validation error messages (empty if valid)
        """
        errors: List[str] = []
        primary = parsed.primary.iface
        live = self._live_lines(rendered)

        if not live:
            return ["Empty configuration after rewrite"]

        if primary == bridge:
            # a second run on a converted host, or --bridge naming the NIC
            return [f"Primary interface {primary} is already the bridge {bridge}; nothing to enslave"]

        if "iface lo inet loopback" not in live:
            errors.append("Missing loopback stanza")

        ports = [ln for ln in live if ln.startswith("bridge-ports ")]
        if len(ports) != 1:
            errors.append(f"Expected exactly one bridge-ports line, found {len(ports)}")
        elif ports[0].split(None, 1)[1] != primary:
            errors.append(f"bridge-ports is {ports[0].split(None, 1)[1]!r}, expected {primary!r}")

        if not any(re.match(rf"^iface\s+{re.escape(primary)}\s+inet\s+manual\b", ln) for ln in live):
            errors.append(f"Primary interface {primary} is not configured as inet manual")
        elif any(a.startswith("address ") for a in self._stanza_attrs(rendered, primary, "manual")):
            errors.append(f"Primary interface {primary} still carries an address")

        bridge_attrs = self._stanza_attrs(rendered, bridge, "static")
        if not any(a.startswith("address ") for a in bridge_attrs):
            errors.append(f"Bridge {bridge} has no address")

        for e in errors:
            self.logger.debug("Validation: %s", e)
        return errors


__all__ = ["NetworkValidation"]

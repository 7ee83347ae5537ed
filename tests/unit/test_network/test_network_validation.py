# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import unittest

from fakes.fake_logger import FakeLogger

from debian2pve.network.emitter import render_interfaces
from debian2pve.network.model import ParsedInterfaces, PrimaryConfig
from debian2pve.network.validation import NetworkValidation


class TestNetworkValidation(unittest.TestCase):
    def setUp(self):
        self.v = NetworkValidation(logger=FakeLogger())
        self.parsed = ParsedInterfaces(
            primary=PrimaryConfig(iface="eth0", address="10.0.0.5", netmask="255.255.255.0", gateway="10.0.0.1"),
            aliases={("eth0", "10.0.0.9"): "10.0.0.9"},
        )
        self.rendered = render_interfaces(self.parsed)

    def test_rendered_output_is_valid(self):
        self.assertEqual(self.v.validate_rewrite(self.rendered, self.parsed, "vmbr0"), [])

    def test_empty_output(self):
        self.assertEqual(
            self.v.validate_rewrite("# nothing\n\n", self.parsed, "vmbr0"),
            ["Empty configuration after rewrite"],
        )

    def test_missing_loopback(self):
        text = self.rendered.replace("iface lo inet loopback", "")
        self.assertIn("Missing loopback stanza", self.v.validate_rewrite(text, self.parsed, "vmbr0"))

    def test_bridge_ports_must_name_primary(self):
        text = self.rendered.replace("bridge-ports eth0", "bridge-ports eth1")
        errors = self.v.validate_rewrite(text, self.parsed, "vmbr0")
        self.assertEqual(len(errors), 1)
        self.assertIn("expected 'eth0'", errors[0])

    def test_primary_must_not_keep_address(self):
        text = self.rendered.replace(
            "iface eth0 inet manual",
            "iface eth0 inet manual\n    address 10.0.0.5/24",
        )
        errors = self.v.validate_rewrite(text, self.parsed, "vmbr0")
        self.assertEqual(errors, ["Primary interface eth0 still carries an address"])

    def test_primary_must_be_manual(self):
        text = self.rendered.replace("iface eth0 inet manual", "iface eth0 inet dhcp")
        errors = self.v.validate_rewrite(text, self.parsed, "vmbr0")
        self.assertIn("Primary interface eth0 is not configured as inet manual", errors)

    def test_bridge_name_must_match(self):
        errors = self.v.validate_rewrite(self.rendered, self.parsed, "vmbr1")
        self.assertEqual(errors, ["Bridge vmbr1 has no address"])

    def test_primary_already_bridged(self):
        parsed = ParsedInterfaces(
            primary=PrimaryConfig(iface="vmbr0", address="10.0.0.5", netmask="255.255.255.0", gateway="10.0.0.1"),
        )
        errors = self.v.validate_rewrite(render_interfaces(parsed), parsed, "vmbr0")
        self.assertEqual(len(errors), 1)
        self.assertIn("vmbr0 is already the bridge", errors[0])

    def test_bridge_named_after_primary(self):
        rendered = render_interfaces(self.parsed, bridge="eth0")
        errors = self.v.validate_rewrite(rendered, self.parsed, "eth0")
        self.assertEqual(errors, ["Primary interface eth0 is already the bridge eth0; nothing to enslave"])


if __name__ == "__main__":
    unittest.main()

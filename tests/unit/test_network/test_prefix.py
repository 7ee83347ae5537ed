# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest
from fakes.fake_logger import FakeLogger

from debian2pve.core.exceptions import InvalidNetmaskError
from debian2pve.network.prefix import inline_prefix, netmask_to_prefix, normalize_address


@pytest.mark.unit
class TestNetmaskToPrefix:
    @pytest.mark.parametrize(
        "netmask,prefix",
        [
            ("255.255.255.0", 24),
            ("255.255.0.0", 16),
            ("255.0.0.0", 8),
            ("255.255.255.255", 32),
            ("255.255.255.240", 28),
            ("0.0.0.0", 0),
        ],
    )
    def test_common_masks(self, netmask, prefix):
        assert netmask_to_prefix(netmask) == prefix

    def test_bits_are_counted_not_checked_for_contiguity(self):
        assert netmask_to_prefix("255.0.255.0") == 16

    @pytest.mark.parametrize("bad", ["255.255.255", "255.255.256.0", "a.b.c.d", "255.255.255.0.0", "", "-1.0.0.0"])
    def test_invalid_masks_raise(self, bad):
        with pytest.raises(InvalidNetmaskError):
            netmask_to_prefix(bad)


@pytest.mark.unit
class TestNormalizeAddress:
    def test_inline_prefix_passes_through(self):
        assert normalize_address("10.0.0.5/24") == "10.0.0.5/24"
        assert normalize_address("10.0.0.5/24", "255.255.255.0") == "10.0.0.5/24"

    def test_netmask_is_appended_as_prefix(self):
        assert normalize_address("10.0.0.5", "255.255.0.0") == "10.0.0.5/16"

    def test_inline_prefix_wins_over_disagreeing_netmask(self):
        log = FakeLogger()

        assert normalize_address("10.0.0.5/24", "255.255.0.0", logger=log) == "10.0.0.5/24"
        warnings = log.messages("warning")
        assert len(warnings) == 1
        assert "/24" in warnings[0] and "/16" in warnings[0]

    def test_agreeing_netmask_is_silent(self):
        log = FakeLogger()
        normalize_address("10.0.0.5/24", "255.255.255.0", logger=log)
        assert log.messages("warning") == []

    def test_no_netmask_returns_bare_address(self):
        log = FakeLogger()

        assert normalize_address("10.0.0.5", None, logger=log) == "10.0.0.5"
        assert len(log.messages("warning")) == 1

    def test_invalid_netmask_returns_bare_address(self):
        log = FakeLogger()

        assert normalize_address("10.0.0.5", "255.255.999.0", logger=log) == "10.0.0.5"
        assert "Invalid netmask" in log.messages("warning")[0]

    def test_inline_prefix_helper(self):
        assert inline_prefix("10.0.0.5/8") == 8
        assert inline_prefix("10.0.0.5") is None
        assert inline_prefix("2001:db8::1/64") is None

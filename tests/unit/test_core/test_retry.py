# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest
from fakes.fake_logger import FakeLogger

from debian2pve.core.retry import retry_operation


class Flaky:
    def __init__(self, failures: int, exc: type = ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"attempt {self.calls}")
        return "ok"


@pytest.mark.unit
class TestRetryOperation:
    def test_succeeds_after_transient_failures(self):
        sleeps = []
        op = Flaky(2)
        log = FakeLogger()

        result = retry_operation(
            op, max_attempts=3, base_backoff_s=1.0, jitter_s=0, exceptions=ConnectionError,
            logger=log, sleep=sleeps.append,
        )

        assert result == "ok"
        assert op.calls == 3
        assert sleeps == [1.0, 2.0]
        assert len(log.messages("warning")) == 2

    def test_backoff_is_capped(self):
        sleeps = []
        retry_operation(
            Flaky(3), max_attempts=4, base_backoff_s=10.0, max_backoff_s=15.0, jitter_s=0,
            sleep=sleeps.append,
        )
        assert sleeps == [10.0, 15.0, 15.0]

    def test_raises_last_exception_when_exhausted(self):
        op = Flaky(5)
        log = FakeLogger()

        with pytest.raises(ConnectionError, match="attempt 3"):
            retry_operation(op, max_attempts=3, jitter_s=0, logger=log, sleep=lambda _s: None)

        assert op.calls == 3
        assert any("failed after 3 attempts" in m for m in log.messages("error"))

    def test_unlisted_exception_is_not_retried(self):
        op = Flaky(1, exc=ValueError)

        with pytest.raises(ValueError):
            retry_operation(op, exceptions=ConnectionError, sleep=lambda _s: None)

        assert op.calls == 1

    def test_zero_attempts_is_rejected(self):
        with pytest.raises(ValueError):
            retry_operation(lambda: "ok", max_attempts=0)

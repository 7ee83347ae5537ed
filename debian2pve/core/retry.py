# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/core/retry.py
from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar, Union

T = TypeVar("T")

ExcSpec = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


def backoff_delay(attempt: int, base_s: float, max_s: float, jitter_s: float = 0.0) -> float:
    """Delay before retry number `attempt` (1-based): base * 2**(attempt-1), capped, plus jitter."""
    delay = min(base_s * (2 ** (attempt - 1)), max_s)
    return delay + (random.uniform(0, jitter_s) if jitter_s > 0 else 0.0)


def retry_operation(
    operation: Callable[[], T],
    *,
    max_attempts: int = 3,
    base_backoff_s: float = 2.0,
    max_backoff_s: float = 60.0,
    jitter_s: float = 1.0,
    exceptions: ExcSpec = Exception,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call `operation` until it returns, retrying on `exceptions`.

    Exceptions outside `exceptions` propagate immediately. After the last
    attempt the final exception is re-raised.

        key = retry_operation(fetch, exceptions=requests.RequestException,
                              operation_name="GET release key", logger=log)
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    attempt = 1
    while True:
        try:
            return operation()
        except exceptions as e:
            if attempt >= max_attempts:
                if logger:
                    logger.error("%s failed after %d attempts: %s", operation_name, attempt, e)
                raise
            delay = backoff_delay(attempt, base_backoff_s, max_backoff_s, jitter_s)
            if logger:
                logger.warning(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    operation_name, attempt, max_attempts, e, delay,
                )
            sleep(delay)
            attempt += 1

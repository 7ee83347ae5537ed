# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/core/steps.py
"""
Outcome of a single provisioning step.

Fatal conditions are raised as exceptions (see core.exceptions); everything
else a step can report is one of these results, so the orchestrator can log
them uniformly and print a summary at the end of the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .logger import Log


class StepStatus(Enum):
    OK = "ok"
    WARNING = "warning"  # failed, but the run continues
    SKIPPED = "skipped"  # dry-run or disabled


@dataclass
class StepResult:
    name: str
    status: StepStatus = StepStatus.OK
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.OK

    @classmethod
    def warning(cls, name: str, detail: str) -> "StepResult":
        return cls(name=name, status=StepStatus.WARNING, detail=detail)

    @classmethod
    def skipped(cls, name: str, detail: str = "dry-run") -> "StepResult":
        return cls(name=name, status=StepStatus.SKIPPED, detail=detail)

    def log(self, logger: logging.Logger) -> "StepResult":
        if self.status is StepStatus.WARNING:
            Log.warn(logger, f"{self.name}: {self.detail}" if self.detail else self.name)
        elif self.status is StepStatus.SKIPPED:
            logger.info("⏭️  %s skipped (%s)", self.name, self.detail or "disabled")
        else:
            Log.ok(logger, f"{self.name}: {self.detail}" if self.detail else self.name)
        return self


def summarize(results: List[StepResult]) -> Dict[str, int]:
    out = {s.value: 0 for s in StepStatus}
    for r in results:
        out[r.status.value] += 1
    return out


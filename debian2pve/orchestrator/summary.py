# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# debian2pve/orchestrator/summary.py
"""
End-of-run summary panel (stderr, so --dry-run stdout stays a clean interfaces file).
"""
from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.steps import StepResult, StepStatus, summarize

_MARK = {
    StepStatus.OK: ("✔", "green"),
    StepStatus.WARNING: ("!", "yellow"),
    StepStatus.SKIPPED: ("-", "dim"),
}


def summary_panel(results: List[StepResult], *, title: str = "debian2pve") -> Panel:
    body = Text()
    for i, r in enumerate(results):
        mark, style = _MARK[r.status]
        if i:
            body.append("\n")
        body.append(f"{mark} ", style=style)
        body.append(r.name, style="bold" if r.status is StepStatus.WARNING else "")
        if r.detail:
            body.append(f"  {r.detail}", style="dim")

    counts = summarize(results)
    subtitle = f"{counts['ok']} ok, {counts['warning']} warning(s), {counts['skipped']} skipped"
    return Panel(
        body,
        title=title,
        title_align="left",
        subtitle=subtitle,
        subtitle_align="right",
        expand=True,
        style="yellow" if counts["warning"] else "green",
    )


def print_summary(results: List[StepResult], console: Optional[Console] = None) -> None:
    con = console or Console(stderr=True)
    con.print(summary_panel(results))

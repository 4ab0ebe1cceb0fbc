"""
Usage Analyzer: which pivot choices the expressions actually touched.

Packaging emits one build property per used choice, so it needs to know,
after all conditions have been rendered, which choices came up.

This module only reads engine state. It never modifies the registry
or the caches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from pivots.engine import PivotEngine


@dataclass
class PivotUsage:
    """Usage of a single pivot."""
    pivot: str
    used: List[str] = field(default_factory=list)
    unused: List[str] = field(default_factory=list)

    @property
    def coverage_percent(self) -> float:
        total = len(self.used) + len(self.unused)
        return 100.0 * len(self.used) / total if total else 0.0


@dataclass
class UsageReport:
    """Choice usage across every pivot of an engine."""

    pivots: Dict[str, PivotUsage] = field(default_factory=dict)
    rendered_expressions: int = 0
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def unused_pivots(self) -> List[str]:
        return [name for name, usage in self.pivots.items() if not usage.used]


def analyze_usage(engine: PivotEngine) -> UsageReport:
    """
    Summarize choice usage for an engine.

    Choices are listed in declaration order. Pivots with no used choice
    get a warning, since their declarations have no effect on any
    rendered condition.
    """
    report = UsageReport(rendered_expressions=engine.cache_info().size)
    used = engine.used_choices()

    for name, pivot in engine.registry.items():
        seen = used.get(name, frozenset())
        usage = PivotUsage(pivot=name)
        for choice in pivot.choice_names:
            (usage.used if choice in seen else usage.unused).append(choice)
        report.pivots[name] = usage

        if not usage.used:
            report.add_warning(f"Pivot '{name}' is never referenced by any expression")

    return report


def format_usage_report(report: UsageReport) -> str:
    lines = [f"Rendered expressions: {report.rendered_expressions}"]
    for usage in report.pivots.values():
        lines.append(
            f"  {usage.pivot}: used {','.join(usage.used) or '(none)'}"
            f" | unused {','.join(usage.unused) or '(none)'}"
            f" ({usage.coverage_percent:.0f}%)"
        )
    for msg in report.warnings:
        lines.append(f"  WARNING: {msg}")
    return "\n".join(lines)


__all__ = ["PivotUsage", "UsageReport", "analyze_usage", "format_usage_report"]

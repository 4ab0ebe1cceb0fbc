"""
Tests for the usage analyzer.

Tests verify that the analyzer correctly:
    - Splits each pivot's choices into used and unused
    - Counts rendered expressions
    - Warns about pivots no expression references
"""

from pivots.analyzer import analyze_usage, format_usage_report
from pivots.engine import PivotEngine
from pivots.examples import build_example_registry


def test_fresh_engine():
    """Nothing rendered: every pivot is unused."""
    engine = PivotEngine(build_example_registry())
    report = analyze_usage(engine)

    assert report.rendered_expressions == 0
    assert report.unused_pivots == ["Platform", "Configuration", "Linkage", "PlatformToolset"]
    assert len(report.warnings) == 4


def test_used_and_unused_choices():
    engine = PivotEngine(build_example_registry())
    engine.build_condition("zlib", "x86 & Debug")
    engine.path("zlib", "amd64 & !static")

    report = analyze_usage(engine)

    platform = report.pivots["Platform"]
    assert platform.used == ["Win32", "x64"]
    assert platform.unused == ["ARM"]
    assert report.pivots["Linkage"].used == ["static"]
    assert report.pivots["Configuration"].coverage_percent == 50.0
    assert report.unused_pivots == ["PlatformToolset"]
    assert report.rendered_expressions == 2


def test_format_report():
    engine = PivotEngine(build_example_registry())
    engine.label("ARM | v120")

    text = format_usage_report(analyze_usage(engine))

    assert "Rendered expressions: 1" in text
    assert "Platform: used ARM | unused Win32,x64" in text
    assert "WARNING: Pivot 'Linkage' is never referenced by any expression" in text


def test_warnings_not_duplicated():
    engine = PivotEngine(build_example_registry())
    report = analyze_usage(engine)
    report.add_warning(report.warnings[0])
    assert len(report.warnings) == 4

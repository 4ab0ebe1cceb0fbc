#!/usr/bin/env python3
"""
Demo: Normalize and render pivot expressions.

Shows the canonical form of a few conditions and their rendering in
every template, then the choice-usage report.
"""

from pivots.analyzer import analyze_usage, format_usage_report
from pivots.backends import TEMPLATES
from pivots.engine import PivotEngine
from pivots.examples import build_example_registry

EXPRESSIONS = [
    "x86 & Debug",
    "Debug & x86",
    "x64 | ARM",
    "!(Win32 | ARM) & (dynamic | static)",
    "x86 | x64 | ARM",
    "vs2013 & !ltcg",
]


def main():
    engine = PivotEngine(build_example_registry())

    print("=" * 80)
    print("PIVOT EXPRESSION DEMO")
    print("=" * 80)

    for text in EXPRESSIONS:
        print(f"\n{text}")
        print("-" * 80)
        print(f"  canonical : {engine.evaluate(text)}")
        for name in TEMPLATES:
            print(f"  {name:<10}: {engine.render('zlib', text, name)}")

    print("\n" + "=" * 80)
    print(format_usage_report(analyze_usage(engine)))
    print("=" * 80)


if __name__ == "__main__":
    main()

"""
Tests for PivotEngine, the public entry point.

These tests verify:
    - The end-to-end scenarios (evaluate, simplify, render)
    - Render caching keyed on canonical value, not surface text
    - Used-choice tracking
    - Sharing one engine between threads
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

import pivots.engine
from pivots import PivotEngine, PivotsExpression
from pivots.backends import LABEL
from pivots.model import ChoiceDefinition, PivotDefinition


def build_engine(platforms=("x86", "x64")) -> PivotEngine:
    return PivotEngine.from_definitions([
        PivotDefinition(name="Platform", choices=[ChoiceDefinition(c) for c in platforms]),
        PivotDefinition(name="Config", choices=[ChoiceDefinition("Debug"), ChoiceDefinition("Release")]),
    ])


@pytest.fixture
def render_calls(monkeypatch):
    """Count how often the engine actually renders."""
    calls = []
    real = pivots.engine.render_expression

    def counting(*args, **kwargs):
        calls.append(args[0])
        return real(*args, **kwargs)

    monkeypatch.setattr(pivots.engine, "render_expression", counting)
    return calls


class TestScenario:
    """Platform = {x86, x64}, Config = {Debug, Release}."""

    def test_label(self):
        engine = build_engine()
        assert engine.label("x86&Debug") == "x86 and Debug"

    def test_build_condition(self):
        engine = build_engine()
        assert engine.build_condition("zlib", "x86|x64") == (
            "'$(Platform.ToLower())' == 'x86' Or '$(Platform.ToLower())' == 'x64'"
        )

    def test_every_platform_is_true(self):
        """With only two platforms, x86|x64 covers the whole pivot."""
        engine = build_engine()
        assert engine.evaluate("x86|x64") == PivotsExpression.TRUE

    def test_config_dropped(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        result = engine.evaluate("(x86|x64) & (Debug|Release)")
        assert result.relevant == ("Platform",)

    def test_path_and_filename(self):
        engine = build_engine()
        assert engine.path("zlib", "x86 & Debug") == "x86\\Debug"
        assert engine.filename("zlib", "x86 & Debug") == "x86_Debug"

    def test_render_by_template_name(self):
        engine = build_engine()
        assert engine.render("", "x86 & Debug", "label") == "x86 and Debug"

    def test_empty_expression(self):
        engine = build_engine()
        assert engine.label("") == ""
        assert engine.build_condition("zlib", "") == ""
        assert engine.evaluate("") == PivotsExpression.TRUE

    def test_alias(self):
        engine = PivotEngine.from_definitions([
            PivotDefinition(name="Platform", choices=[
                ChoiceDefinition("Win32", aliases=["x86"]),
                ChoiceDefinition("x64"),
            ]),
        ])
        assert engine.label("x86") == "Win32"
        assert engine.evaluate("x86") == engine.evaluate("Win32")


class TestCache:
    """Renders are memoized by (scope, canonical value, template)."""

    def test_equivalent_spellings_share_entry(self, render_calls):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        first = engine.build_condition("zlib", "x86|x64")
        second = engine.build_condition("zlib", "x64 | x86")
        assert first == second
        assert render_calls == ["x86|x64"]
        info = engine.cache_info()
        assert (info.hits, info.misses, info.size) == (1, 1, 1)

    def test_first_spelling_wins(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        engine.label("x64 | x86")
        assert engine.label("x86 | x64") == "x64 or x86"

    def test_scope_and_template_are_part_of_key(self, render_calls):
        engine = build_engine()
        engine.build_condition("zlib", "x86")
        engine.build_condition("libpng", "x86")
        engine.label("x86")
        assert len(render_calls) == 3
        assert engine.cache_info().size == 3

    def test_semantically_different_not_shared(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        assert engine.label("x86 & Debug") != engine.label("x86 & Release")

    def test_engines_do_not_share_caches(self, render_calls):
        build_engine().label("x86")
        build_engine().label("x86")
        assert len(render_calls) == 2

    def test_custom_template_with_builtin_name(self):
        engine = build_engine()
        shouting = replace(LABEL, atom=lambda scope, choice, pivot: choice.upper())
        assert engine.render("", "x86", LABEL) == "x86"
        assert engine.render("", "x86", shouting) == "X86"
        assert engine.cache_info().size == 2


class TestNormalize:
    """normalize() returns the first spelling seen for a canonical value."""

    def test_equivalent_spellings(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        assert engine.normalize("x86|x64") == "x86|x64"
        assert engine.normalize("x64 | x86") == "x86|x64"
        assert engine.normalize("x86 & Debug") == "x86 & Debug"

    def test_empty(self):
        engine = build_engine()
        assert engine.normalize("") == ""
        assert engine.normalize("true") == "true"
        assert engine.label("true") == "true"

    def test_matches_render_spelling(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        engine.normalize("x64 | x86")
        assert engine.label("x86 | x64") == "x64 or x86"


class TestUsage:
    """Used-choice tracking."""

    def test_evaluate_marks_choices(self):
        engine = build_engine()
        engine.evaluate("x86 & !Debug")
        assert engine.used_choices() == {"Platform": {"x86"}, "Config": {"Debug"}}

    def test_render_marks_canonical_choices(self):
        engine = PivotEngine.from_definitions([
            PivotDefinition(name="Platform", choices=[
                ChoiceDefinition("Win32", aliases=["x86"]),
                ChoiceDefinition("x64"),
            ]),
        ])
        engine.path("zlib", "x86")
        assert engine.used_choices() == {"Platform": {"Win32"}}

    def test_absorbed_operands_still_marked(self):
        engine = build_engine()
        assert engine.evaluate("false & x86") == PivotsExpression.FALSE
        assert engine.evaluate("true | Debug") == PivotsExpression.TRUE
        assert engine.used_choices() == {"Platform": {"x86"}, "Config": {"Debug"}}


class TestThreads:
    """One engine shared between threads."""

    def test_concurrent_renders(self):
        engine = build_engine(platforms=("x86", "x64", "ARM"))
        spellings = ["x86 | x64", "x64 | x86", "x64 || x86", "(x86) + (x64)"] * 25

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda text: engine.build_condition("zlib", text), spellings))

        assert len(set(results)) == 1
        assert engine.cache_info().size == 1
        assert engine.cache_info().misses == 1


def test_from_config_file(tmp_path):
    config = tmp_path / "pivots.yaml"
    config.write_text(
        "Platform:\n"
        "  choices: [Win32, x64]\n"
        "  Win32:\n"
        "    aliases: [x86]\n"
        "Configuration:\n"
        "  choices: [Debug, Release]\n"
    )
    engine = PivotEngine.from_config_file(str(config))
    assert engine.label("x86 & !Release") == "Win32 and not Release"

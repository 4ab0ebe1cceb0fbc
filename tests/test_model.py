"""
Tests for the pivot model objects.

These tests verify:
    - Default descriptions and aliases
    - Built-in detection
    - Immutability of resolved pivots and choices
"""

import dataclasses

import pytest

from pivots.model import Choice, ChoiceDefinition, Pivot, PivotDefinition


class TestChoice:
    """Test resolving choice definitions."""

    def test_default_alias_is_lowercased_name(self):
        """A choice without aliases resolves by its own name, any case."""
        choice = Choice.from_definition(ChoiceDefinition(name="Debug"))
        assert choice.aliases == ("debug",)
        assert choice.matches_alias("DEBUG")

    def test_declared_aliases_replace_default(self):
        """Declared aliases are lowercased and replace the default alias."""
        choice = Choice.from_definition(ChoiceDefinition(name="Win32", aliases=["X86", "IA32"]))
        assert choice.aliases == ("x86", "ia32")
        assert choice.matches_alias("x86")
        assert not choice.matches_alias("win32")

    def test_description_defaults_to_name(self):
        choice = Choice.from_definition(ChoiceDefinition(name="Release"))
        assert choice.description == "Release"

    def test_choice_immutable(self):
        choice = Choice.from_definition(ChoiceDefinition(name="Release"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            choice.name = "Changed"


class TestPivot:
    """Test resolving pivot definitions."""

    def test_choices_keep_declaration_order(self):
        pivot = Pivot.from_definition(PivotDefinition(
            name="Platform",
            choices=[ChoiceDefinition("x86"), ChoiceDefinition("x64"), ChoiceDefinition("ARM")],
        ))
        assert pivot.choice_names == ("x86", "x64", "ARM")
        assert len(pivot) == 3

    def test_repeated_choice_keeps_first(self):
        pivot = Pivot.from_definition(PivotDefinition(
            name="Platform",
            choices=[ChoiceDefinition("x86", description="first"), ChoiceDefinition("x86", description="second")],
        ))
        assert pivot.choice_names == ("x86",)
        assert pivot.choices["x86"].description == "first"

    def test_not_built_in_without_conditions(self):
        pivot = Pivot.from_definition(PivotDefinition(name="Linkage", choices=[ChoiceDefinition("static")]))
        assert not pivot.is_built_in

    def test_built_in_with_condition(self):
        pivot = Pivot.from_definition(PivotDefinition(
            name="Platform",
            choices=[ChoiceDefinition("x64", condition="'$(Platform)' == 'x64'")],
        ))
        assert pivot.is_built_in

    def test_condition_key_defaults_to_name(self):
        """Rendered conditions compare the key, or the pivot name without one."""
        plain = Pivot.from_definition(PivotDefinition(name="Linkage", choices=[ChoiceDefinition("static")]))
        keyed = Pivot.from_definition(PivotDefinition(name="Toolset", key="PlatformToolset", choices=[ChoiceDefinition("v120")]))
        assert plain.condition_key == "Linkage"
        assert keyed.condition_key == "PlatformToolset"

    def test_choices_read_only(self):
        pivot = Pivot.from_definition(PivotDefinition(name="Linkage", choices=[ChoiceDefinition("static")]))
        with pytest.raises(TypeError):
            pivot.choices["dynamic"] = None

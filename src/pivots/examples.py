"""
Example pivot set for demos and tests.

Mirrors a typical native package:
    - Platform is built-in: its choices map to explicit conditions
    - Configuration and Linkage are plain pivots keyed by property name
    - PlatformToolset uses aliases for the compiler version names
"""
from pivots.model import ChoiceDefinition, PivotDefinition
from pivots.registry import PivotRegistry


def build_example_definitions():
    return [
        PivotDefinition(
            name="Platform",
            key="Platform",
            description="Target platform",
            choices=[
                ChoiceDefinition(
                    name="Win32",
                    aliases=["x86", "win32", "ia32", "386"],
                    condition="'$(Platform.ToLower())' == 'win32' Or '$(Platform.ToLower())' == 'x86'",
                ),
                ChoiceDefinition(
                    name="x64",
                    aliases=["x64", "amd64", "em64t", "intel64", "x86-64", "x86_64"],
                    condition="'$(Platform.ToLower())' == 'x64'",
                ),
                ChoiceDefinition(
                    name="ARM",
                    aliases=["arm", "woa"],
                    condition="'$(Platform.ToLower())' == 'arm'",
                ),
            ],
        ),
        PivotDefinition(
            name="Configuration",
            description="Build configuration",
            choices=[
                ChoiceDefinition(name="Debug"),
                ChoiceDefinition(name="Release"),
            ],
        ),
        PivotDefinition(
            name="Linkage",
            key="Linkage",
            description="Which version of the .lib file to link to this library",
            choices=[
                ChoiceDefinition(name="dynamic", description="Dynamic Library (DLL)"),
                ChoiceDefinition(name="static", description="Static"),
                ChoiceDefinition(name="ltcg", description="Static (LTCG)"),
                ChoiceDefinition(name="sxs", description="Side-by-Side"),
            ],
        ),
        PivotDefinition(
            name="PlatformToolset",
            key="PlatformToolset",
            description="Compiler toolset",
            choices=[
                ChoiceDefinition(name="v100", aliases=["v100", "vs2010"]),
                ChoiceDefinition(name="v110", aliases=["v110", "vs2012"]),
                ChoiceDefinition(name="v120", aliases=["v120", "vs2013"]),
            ],
        ),
    ]


def build_example_registry() -> PivotRegistry:
    return PivotRegistry(build_example_definitions())


__all__ = ["build_example_definitions", "build_example_registry"]

"""
Pivot Expressions Package

Build variants are described as named, multi-valued configuration
dimensions ("pivots"), e.g. Platform in {x86, x64, ARM}.

Authors attach boolean text expressions over pivot choices to files and
settings:

    x86 & Debug | ARM

This package turns that text into exact set semantics over the pivots,
minimizes it to a canonical form, and renders it into the target
syntaxes consumed downstream (build conditions, path fragments, labels,
file names).

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Packaging pipelines
    - Build-artifact I/O
    - Executing the strings it renders

All state lives on a PivotEngine instance. There are no module-level
singletons.
"""

from .engine import PivotEngine
from .errors import (
    ConfigError,
    ParseError,
    PivotsError,
    RegistryError,
    UnknownPivot,
    UnresolvedChoice,
)
from .evaluator import PivotsExpression
from .registry import PivotRegistry

__version__ = "0.1.0"

__all__ = [
    "PivotEngine",
    "PivotRegistry",
    "PivotsExpression",
    "PivotsError",
    "ParseError",
    "UnresolvedChoice",
    "UnknownPivot",
    "RegistryError",
    "ConfigError",
]

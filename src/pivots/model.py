"""
Core Pivot Model Objects

Defines the data structures describing configuration dimensions:
    - ChoiceDefinition / PivotDefinition: the typed snapshot handed over
      by whatever reads the configuration file
    - Choice / Pivot: the resolved, immutable form held by the registry

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about expression syntax or render targets
        - Are immutable once inside a registry
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass
class ChoiceDefinition:
    """
    One choice as declared in configuration.

    Properties:
        name: Canonical choice name (e.g., "Win32")
        description: Human-readable description (optional)
        aliases: Alternative spellings (e.g., ["x86", "ia32"]).
            Matched case-insensitively. When empty, the lowercased
            canonical name is the only alias.
        condition: Explicit build condition for built-in pivots (optional)
            Example: "'$(Platform)' == 'Win32'"
    """

    name: str
    description: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    condition: Optional[str] = None


@dataclass
class PivotDefinition:
    """
    One pivot as declared in configuration.

    Properties:
        name: Pivot identifier (e.g., "Platform")
        key: Build property the pivot maps to (optional, defaults to name)
        description: Human-readable description (optional)
        choices: Ordered choice definitions

    A definition with no choices is dropped by the registry.
    """

    name: str
    key: Optional[str] = None
    description: Optional[str] = None
    choices: List[ChoiceDefinition] = field(default_factory=list)


@dataclass(frozen=True)
class Choice:
    """
    A resolved pivot choice.

    IMPORTANT:
        aliases are always lowercase.
        The canonical name is what every renderer emits; aliases are
        only ever used for lookup.
    """

    name: str
    description: str
    aliases: Tuple[str, ...]
    condition: Optional[str] = None

    @classmethod
    def from_definition(cls, definition: ChoiceDefinition) -> "Choice":
        aliases = tuple(a.lower() for a in definition.aliases) or (definition.name.lower(),)
        return cls(
            name=definition.name,
            description=definition.description or definition.name,
            aliases=aliases,
            condition=definition.condition,
        )

    def matches_alias(self, token: str) -> bool:
        return token.lower() in self.aliases


@dataclass(frozen=True, eq=False)
class Pivot:
    """
    A resolved configuration dimension.

    Properties:
        name: Pivot identifier
        key: Build property name used when rendering conditions
        description: Human-readable description
        choices: Read-only ordered mapping of canonical name -> Choice

    INVARIANT:
        A pivot is built-in iff one of its choices carries a condition.
        The registry rejects pivots where only some choices do.
    """

    name: str
    key: Optional[str]
    description: str
    choices: Mapping[str, Choice]

    @classmethod
    def from_definition(cls, definition: PivotDefinition) -> "Pivot":
        choices: Dict[str, Choice] = {}
        for choice_def in definition.choices:
            # First declaration of a repeated choice name wins
            if choice_def.name not in choices:
                choices[choice_def.name] = Choice.from_definition(choice_def)
        return cls(
            name=definition.name,
            key=definition.key,
            description=definition.description or definition.name,
            choices=MappingProxyType(choices),
        )

    @property
    def is_built_in(self) -> bool:
        return any(c.condition is not None for c in self.choices.values())

    @property
    def condition_key(self) -> str:
        """The build property compared against in rendered conditions."""
        return self.key or self.name

    @property
    def choice_names(self) -> Tuple[str, ...]:
        return tuple(self.choices)

    def __len__(self) -> int:
        return len(self.choices)

    def __repr__(self) -> str:
        return f"Pivot(name={self.name!r}, choices={list(self.choices)!r})"

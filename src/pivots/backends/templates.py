"""
Render templates for pivot expressions.

A template fixes the target syntax:
    - the tokens joining terms (AND, OR, AND-NOT, OR-NOT)
    - the token prefixing a negated first term (NOT)
    - the format wrapping a parenthesized group
    - how a single pivot choice is written (the atom)

The token tables are consumed byte-for-byte by downstream tooling.
Do not change them.
"""

from dataclasses import dataclass
from typing import Callable, Dict

from pivots.model import Pivot

AtomFormatter = Callable[[str, str, Pivot], str]


@dataclass(frozen=True)
class Template:
    """
    One target syntax.

    Properties:
        name: Stable identifier, used to look a template up by name
        and_, or_, and_not, or_not, not_: Join / negate tokens
        group: str.format pattern with one {0} slot
        atom: (scope, choice, pivot) -> text for one choice
    """

    name: str
    and_: str
    or_: str
    and_not: str
    or_not: str
    not_: str
    group: str
    atom: AtomFormatter

    def __repr__(self) -> str:
        return f"Template({self.name!r})"


def _build_condition_atom(scope: str, choice: str, pivot: Pivot) -> str:
    if pivot.is_built_in:
        return pivot.choices[choice].condition
    return f"'$({pivot.condition_key}.ToLower())' == '{choice.lower()}'"


def _choice_name_atom(scope: str, choice: str, pivot: Pivot) -> str:
    return choice


BUILD_CONDITION = Template(
    name="build-condition",
    and_=" And ",
    or_=" Or ",
    and_not=" And !",
    or_not=" Or !",
    not_="!",
    group="( {0} )",
    atom=_build_condition_atom,
)

LABEL = Template(
    name="label",
    and_=" and ",
    or_=" or ",
    and_not=" and not ",
    or_not=" or not ",
    not_=" not ",
    group="({0})",
    atom=_choice_name_atom,
)

PATH = Template(
    name="path",
    and_="\\",
    or_="+",
    and_not="\\!",
    or_not="+!",
    not_="!",
    group="({0})",
    atom=_choice_name_atom,
)

FILENAME = Template(
    name="filename",
    and_="_",
    or_="_",
    and_not="_-",
    or_not="_-",
    not_="-",
    group="__{0}__",
    atom=_choice_name_atom,
)

TEMPLATES: Dict[str, Template] = {
    t.name: t for t in (BUILD_CONDITION, LABEL, PATH, FILENAME)
}


__all__ = ["Template", "BUILD_CONDITION", "LABEL", "PATH", "FILENAME", "TEMPLATES"]

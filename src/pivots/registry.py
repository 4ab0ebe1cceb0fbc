"""
Pivot Registry: the read-only set of known pivots.

Built once from an ordered list of PivotDefinition objects, then only
ever read. Parsing, evaluation and rendering all resolve tokens here.

Resolution order for a token:
    1. Exact canonical choice name, scanning pivots in declaration order
    2. Case-insensitive alias, scanning pivots in declaration order

The first declared pivot wins on ties.
"""

import logging
import warnings
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Tuple

from pivots.errors import RegistryError, UnknownPivot, UnresolvedChoice
from pivots.model import Pivot, PivotDefinition

logger = logging.getLogger(__name__)


class PivotRegistry(Mapping):
    """Immutable mapping of pivot name -> Pivot."""

    def __init__(self, definitions: Iterable[PivotDefinition]):
        pivots: Dict[str, Pivot] = {}
        for definition in definitions:
            if not definition.choices:
                logger.debug("Dropping pivot %r: no choices declared", definition.name)
                continue
            if definition.name in pivots:
                raise RegistryError(f"Duplicate pivot name: {definition.name}")
            pivot = Pivot.from_definition(definition)
            _validate_conditions(pivot)
            pivots[pivot.name] = pivot

        self._pivots = pivots
        self._check_ambiguous_choices()
        logger.debug(
            "Built pivot registry: %s",
            ", ".join(f"{p.name}({len(p)})" for p in pivots.values()) or "(empty)",
        )

    # =========================================================================
    # Mapping protocol (read-only)
    # =========================================================================

    def __getitem__(self, name: str) -> Pivot:
        return self.lookup(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._pivots)

    def __len__(self) -> int:
        return len(self._pivots)

    def __contains__(self, name: object) -> bool:
        return name in self._pivots

    def __repr__(self) -> str:
        return f"PivotRegistry({list(self._pivots)!r})"

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, name: str) -> Pivot:
        """
        Retrieve a pivot by name.

        Raises:
            UnknownPivot: If no pivot has that name
        """
        try:
            return self._pivots[name]
        except KeyError:
            raise UnknownPivot(name) from None

    def choices(self, name: str) -> Tuple[str, ...]:
        """Canonical choice names of a pivot, in declaration order."""
        return self.lookup(name).choice_names

    def try_resolve(self, token: str) -> Optional[Tuple[str, str]]:
        """Like resolve(), but returns None when nothing matches."""
        for pivot in self._pivots.values():
            if token in pivot.choices:
                return pivot.name, token

        for pivot in self._pivots.values():
            for choice in pivot.choices.values():
                if choice.matches_alias(token):
                    return pivot.name, choice.name

        return None

    def resolve(self, token: str) -> Tuple[str, str]:
        """
        Resolve a token to (pivot_name, canonical_choice).

        Args:
            token: Choice name or alias as written in an expression

        Returns:
            Tuple of pivot name and canonical choice name

        Raises:
            UnresolvedChoice: If the token matches no choice or alias
        """
        result = self.try_resolve(token)
        if result is None:
            raise UnresolvedChoice(token)
        return result

    def _check_ambiguous_choices(self) -> None:
        owner: Dict[str, str] = {}
        for pivot in self._pivots.values():
            for choice in pivot.choices:
                if choice in owner:
                    warnings.warn(
                        f"Choice '{choice}' is declared by pivots '{owner[choice]}' and "
                        f"'{pivot.name}'; expressions resolve it to '{owner[choice]}'",
                        UserWarning,
                    )
                else:
                    owner[choice] = pivot.name


def _validate_conditions(pivot: Pivot) -> None:
    """A built-in pivot must give every choice a condition."""
    if not pivot.is_built_in:
        return
    missing = [c.name for c in pivot.choices.values() if c.condition is None]
    if missing:
        raise RegistryError(
            f"Pivot '{pivot.name}' is built-in but choices {missing} have no condition"
        )


__all__ = ["PivotRegistry"]

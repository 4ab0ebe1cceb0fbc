"""
Canonical expression values.

A PivotsExpression is the set-semantics meaning of a condition: either
an invariant (always true / always false), or the exact set of
combinations that satisfy it over the pivots that actually matter.

Example, with Platform = {a, b} and Config = {c, d}:

    "a | c"

Becomes:
    PivotsExpression(
        relevant=("Config", "Platform"),
        combinations=frozenset({("c", "a"), ("d", "a"), ("c", "b")}),
    )

Each combination is a tuple holding one choice per relevant pivot,
aligned with the sorted `relevant` tuple. Because `combinations` is a
frozenset, two values compare and hash equal whenever they describe the
same set, whatever order the combinations were produced in.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PivotsExpression:
    """
    Immutable, value-equal canonical expression.

    Properties:
        relevant: Sorted names of the pivots the expression depends on
        combinations: Satisfying choice tuples, aligned with `relevant`
        invariant: True / False for constant expressions, else None

    INVARIANT:
        Values produced by the evaluator are simplified: `combinations`
        is never empty (that is the FALSE invariant) and never the full
        product of the relevant pivots (that is the TRUE invariant).
    """

    relevant: Tuple[str, ...] = ()
    combinations: FrozenSet[Tuple[str, ...]] = frozenset()
    invariant: Optional[bool] = None

    def __post_init__(self):
        if self.invariant is not None:
            if self.relevant or self.combinations:
                raise ValueError("Invariant expressions have no pivots or combinations")
            return
        if list(self.relevant) != sorted(set(self.relevant)):
            raise ValueError(f"Relevant pivots must be sorted and unique: {self.relevant}")
        width = len(self.relevant)
        for combination in self.combinations:
            if len(combination) != width:
                raise ValueError(
                    f"Combination {combination} does not match pivots {self.relevant}"
                )

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_assignments(
        cls, relevant: Iterable[str], assignments: Iterable[Mapping[str, str]]
    ) -> "PivotsExpression":
        """
        Build a (not yet simplified) expression from pivot -> choice maps.

        Args:
            relevant: Pivot names, any order
            assignments: One mapping per combination, covering every
                relevant pivot
        """
        ordered = tuple(sorted(set(relevant)))
        combinations = frozenset(
            tuple(assignment[pivot] for pivot in ordered) for assignment in assignments
        )
        return cls(relevant=ordered, combinations=combinations)

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def is_invariant(self) -> bool:
        return self.invariant is not None

    @property
    def is_always_true(self) -> bool:
        return self.invariant is True

    @property
    def is_always_false(self) -> bool:
        return self.invariant is False

    def assignments(self) -> List[Dict[str, str]]:
        """Combinations as pivot -> choice dicts, in sorted order."""
        return [dict(zip(self.relevant, c)) for c in self.sorted_combinations()]

    def sorted_combinations(self) -> List[Tuple[str, ...]]:
        return sorted(self.combinations)

    def choice_sets(self) -> FrozenSet[FrozenSet[str]]:
        """Combinations as sets of choice names, ignoring pivot order."""
        return frozenset(frozenset(c) for c in self.combinations)

    def matches(self, variant: Mapping[str, Any]) -> bool:
        """
        Check whether one build variant satisfies the expression.

        Args:
            variant: pivot -> choice for (at least) every relevant pivot

        Raises:
            KeyError: If the variant omits a relevant pivot
        """
        if self.invariant is not None:
            return self.invariant
        return tuple(variant[p] for p in self.relevant) in self.combinations

    def __str__(self) -> str:
        if self.invariant is not None:
            return "true" if self.invariant else "false"
        return "|".join(f"({','.join(c)})" for c in self.sorted_combinations())


PivotsExpression.TRUE = PivotsExpression(invariant=True)
PivotsExpression.FALSE = PivotsExpression(invariant=False)


__all__ = ["PivotsExpression"]

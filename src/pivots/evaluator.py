"""
Evaluator (Layer 2: AST → canonical PivotsExpression).

Gives each AST node its exact meaning as a set of pivot combinations:

    PivotChoice(p, c)          {(c,)} over {p}
    PivotChoice(p, c, inv)     every other choice of p, over {p}
    And(L, R)                  join of L and R on their shared pivots
    Or(L, R)                   union, after widening both sides onto
                               the union of their pivots

Negation is local to the leaf's own pivot: "!x86" means "some other
platform", not "anything at all but x86".

Every AND / OR result is simplified, so intermediate sets stay small.
"""

import itertools
import logging
from typing import Callable, Dict, List, Optional

from pivots.canonical import PivotsExpression
from pivots.expressions import AndNode, FalseNode, Node, OrNode, PivotChoice, TrueNode
from pivots.registry import PivotRegistry
from pivots.simplifier import simplify

logger = logging.getLogger(__name__)

ChoiceCallback = Callable[[str, str], None]


def evaluate(
    node: Node, registry: PivotRegistry, on_choice: Optional[ChoiceCallback] = None
) -> PivotsExpression:
    """
    Convert an AST into its canonical expression.

    Args:
        node: AST root from the parser
        registry: Registry supplying each pivot's choices
        on_choice: Called with (pivot, choice) for every leaf evaluated

    Returns:
        Simplified PivotsExpression
    """
    if isinstance(node, TrueNode):
        return PivotsExpression.TRUE
    if isinstance(node, FalseNode):
        return PivotsExpression.FALSE
    if isinstance(node, PivotChoice):
        return _evaluate_choice(node, registry, on_choice)
    if isinstance(node, AndNode):
        return _evaluate_and(node, registry, on_choice)
    if isinstance(node, OrNode):
        return _evaluate_or(node, registry, on_choice)
    raise TypeError(f"Unsupported node type: {type(node)}")


def _evaluate_choice(node: PivotChoice, registry, on_choice) -> PivotsExpression:
    if on_choice is not None:
        on_choice(node.pivot, node.choice)

    if node.inverted:
        chosen = [c for c in registry.choices(node.pivot) if c != node.choice]
    else:
        chosen = [node.choice]

    # A single-choice pivot inverted leaves nothing; simplify makes it FALSE
    expr = PivotsExpression(
        relevant=(node.pivot,),
        combinations=frozenset((c,) for c in chosen),
    )
    return simplify(expr, registry)


def _evaluate_and(node: AndNode, registry, on_choice) -> PivotsExpression:
    # Both operands are always evaluated so every leaf reaches on_choice.
    left = evaluate(node.left, registry, on_choice)
    right = evaluate(node.right, registry, on_choice)

    if left.is_always_false or right.is_always_true:
        return left
    if right.is_always_false or left.is_always_true:
        return right

    return simplify(intersect(left, right), registry)


def _evaluate_or(node: OrNode, registry, on_choice) -> PivotsExpression:
    left = evaluate(node.left, registry, on_choice)
    right = evaluate(node.right, registry, on_choice)

    if left.is_always_true or right.is_always_false:
        return left
    if right.is_always_true or left.is_always_false:
        return right

    return simplify(union(left, right, registry), registry)


# =============================================================================
# SET OPERATIONS (non-invariant operands, results not yet simplified)
# =============================================================================


def intersect(left: PivotsExpression, right: PivotsExpression) -> PivotsExpression:
    """Combinations satisfying both sides, over the union of their pivots."""
    if len(left.relevant) > len(right.relevant):
        left, right = right, left

    left_pivots = set(left.relevant)
    right_pivots = set(right.relevant)
    shared = sorted(left_pivots & right_pivots)

    if left_pivots <= right_pivots:
        # Semi-join: keep right combinations whose projection left accepts
        positions = [right.relevant.index(p) for p in left.relevant]
        kept = frozenset(
            c for c in right.combinations
            if tuple(c[i] for i in positions) in left.combinations
        )
        return PivotsExpression(relevant=right.relevant, combinations=kept)

    relevant = left_pivots | right_pivots
    left_rows = left.assignments()
    right_rows = right.assignments()

    if not shared:
        return PivotsExpression.from_assignments(
            relevant,
            ({**l_row, **r_row} for l_row in left_rows for r_row in right_rows),
        )

    by_shared: Dict[tuple, List[Dict[str, str]]] = {}
    for l_row in left_rows:
        by_shared.setdefault(tuple(l_row[p] for p in shared), []).append(l_row)

    joined = []
    for r_row in right_rows:
        for l_row in by_shared.get(tuple(r_row[p] for p in shared), []):
            joined.append({**l_row, **r_row})

    return PivotsExpression.from_assignments(relevant, joined)


def union(
    left: PivotsExpression, right: PivotsExpression, registry: PivotRegistry
) -> PivotsExpression:
    """Combinations satisfying either side, over the union of their pivots."""
    relevant = set(left.relevant) | set(right.relevant)
    rows = expand(left, relevant, registry) + expand(right, relevant, registry)
    return PivotsExpression.from_assignments(relevant, rows)


def expand(expr: PivotsExpression, relevant, registry: PivotRegistry) -> List[Dict[str, str]]:
    """
    Widen an expression onto more pivots.

    A pivot the expression does not constrain matches every one of its
    choices, so each combination is replicated once per choice of each
    missing pivot.
    """
    missing = sorted(set(relevant) - set(expr.relevant))
    rows = expr.assignments()
    if not missing:
        return rows

    domains = [registry.choices(p) for p in missing]
    expanded = []
    for row in rows:
        for extra in itertools.product(*domains):
            expanded.append({**row, **dict(zip(missing, extra))})
    return expanded


__all__ = ["PivotsExpression", "evaluate", "intersect", "union", "expand"]

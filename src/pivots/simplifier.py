"""
Simplifier: reduce an expression to the fewest relevant pivots.

A pivot can be dropped when every reduced combination (the combination
with that pivot's choice removed) appears once for each of the pivot's
choices. The pivot then has no influence on membership.

Checked cheaply by counting: with N combinations and k choices, the
pivot is droppable iff k divides N and exactly N / k distinct reduced
combinations remain. No reduced combination can appear more than k
times, so N / k distinct ones means each appears exactly k times.
"""

import math

from pivots.canonical import PivotsExpression
from pivots.registry import PivotRegistry


def simplify(expr: PivotsExpression, registry: PivotRegistry) -> PivotsExpression:
    """
    Return the minimal equivalent of an expression.

    Empty combination sets collapse to FALSE, full products to TRUE.
    Each round drops one pivot, so this halts within len(relevant)
    rounds. Idempotent.
    """
    while not expr.is_invariant:
        if not expr.combinations:
            return PivotsExpression.FALSE

        sizes = [len(registry.choices(pivot)) for pivot in expr.relevant]
        if len(expr.combinations) == math.prod(sizes):
            return PivotsExpression.TRUE

        reduced_expr = _drop_one_pivot(expr, sizes)
        if reduced_expr is None:
            return expr
        expr = reduced_expr

    return expr


def _drop_one_pivot(expr: PivotsExpression, sizes):
    total = len(expr.combinations)

    for index, size in enumerate(sizes):
        if total % size:
            continue
        expected = total // size
        reduced = set()
        for combination in expr.combinations:
            reduced.add(combination[:index] + combination[index + 1:])
            if len(reduced) > expected:
                break
        if len(reduced) == expected:
            return PivotsExpression(
                relevant=expr.relevant[:index] + expr.relevant[index + 1:],
                combinations=frozenset(reduced),
            )

    return None


__all__ = ["simplify"]

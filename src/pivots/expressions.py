"""
Expression AST for pivot conditions

Parsed condition text is represented as a small tree of immutable
nodes:

    TrueNode / FalseNode       constant leaves
    PivotChoice                "this pivot has this choice" (or not)
    AndNode / OrNode           binary combinators

ARCHITECTURAL RULE:
    There is no NOT node.
    The parser pushes negation down to the leaves with invert()
    (De Morgan), so evaluation only ever sees AND, OR and leaves.
"""

from abc import ABC
from dataclasses import dataclass


class Node(ABC):
    """
    Base class for all AST nodes.

    Structure only. Evaluation lives in pivots.evaluator.
    """
    pass


@dataclass(frozen=True)
class TrueNode(Node):
    """Always satisfied."""
    pass


@dataclass(frozen=True)
class FalseNode(Node):
    """Never satisfied."""
    pass


@dataclass(frozen=True)
class PivotChoice(Node):
    """
    A reference to one choice of one pivot.

    Example:
        "!x86" with x86 an alias of Platform.Win32

    Becomes:
        PivotChoice(pivot="Platform", choice="Win32", inverted=True)

    Properties:
        pivot: Pivot name the token resolved to
        choice: Canonical choice name (never an alias)
        inverted: True when the leaf means "any other choice of this pivot"
    """

    pivot: str
    choice: str
    inverted: bool = False


@dataclass(frozen=True)
class AndNode(Node):
    left: Node
    right: Node


@dataclass(frozen=True)
class OrNode(Node):
    left: Node
    right: Node


TRUE = TrueNode()
FALSE = FalseNode()


def invert(node: Node) -> Node:
    """
    Return the logical negation of a node.

    Constants swap, leaves flip their inverted flag, and AND/OR swap
    with both children inverted.
    """
    if isinstance(node, TrueNode):
        return FALSE
    if isinstance(node, FalseNode):
        return TRUE
    if isinstance(node, PivotChoice):
        return PivotChoice(node.pivot, node.choice, not node.inverted)
    if isinstance(node, AndNode):
        return OrNode(invert(node.left), invert(node.right))
    if isinstance(node, OrNode):
        return AndNode(invert(node.left), invert(node.right))
    raise TypeError(f"Unsupported node type: {type(node)}")


__all__ = [
    "Node",
    "TrueNode",
    "FalseNode",
    "PivotChoice",
    "AndNode",
    "OrNode",
    "TRUE",
    "FALSE",
    "invert",
]

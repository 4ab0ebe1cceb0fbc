"""
Expression Parser (Layer 1: Raw Text → AST).

Converts pivot condition text into the AST in pivots.expressions.

Syntax:
    - Atoms: choice names or aliases, plus the literals true / false
    - AND: a run of '&', '\\', ',' or '/'   (e.g. "x86 && Debug")
    - OR:  a run of '|' or '+'              (e.g. "x86 || x64")
    - NOT: a run of '!' (odd run negates, even run cancels)
    - Parentheses group sub-expressions

Operators have equal precedence and apply left to right:
    a | b & c   ==   (a | b) & c

The token stream is first arranged into Terms (operator, negation,
operand). The renderer walks the same Terms, so parsing and rendering
agree on what is a valid expression.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from pivots.errors import ParseError, UnresolvedChoice
from pivots.expressions import (
    FALSE,
    TRUE,
    AndNode,
    Node,
    OrNode,
    PivotChoice,
    invert,
)
from pivots.registry import PivotRegistry


class TokenKind(Enum):
    AND = "and"
    OR = "or"
    NOT = "not"
    LPAREN = "("
    RPAREN = ")"
    WORD = "word"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


@dataclass(frozen=True)
class Term:
    """
    One operand of an expression, with the operator joining it to the
    terms before it.

    Properties:
        operator: None for the first term of a group, else AND or OR
        negated: True when an odd number of '!' precede the operand
        word: The atom text, or None for a parenthesized group
        group: Terms of a parenthesized group, or None for an atom
        position: Offset of the operand in the source text
    """

    operator: Optional[TokenKind]
    negated: bool
    word: Optional[str]
    group: Optional[Tuple["Term", ...]]
    position: int


_TOKEN_RX = re.compile(
    r"""
     (?P<space>\s+)
    |(?P<and>[&\\,/]+)
    |(?P<or>[|+]+)
    |(?P<not>!+)
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<word>[A-Za-z0-9_]+)
    |(?P<invalid>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_KIND_BY_GROUP = {
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "not": TokenKind.NOT,
    "lparen": TokenKind.LPAREN,
    "rparen": TokenKind.RPAREN,
    "word": TokenKind.WORD,
    "invalid": TokenKind.INVALID,
}


def tokenize(expression: str) -> List[Token]:
    """Split expression text into tokens, dropping whitespace."""
    tokens = []
    for match in _TOKEN_RX.finditer(expression):
        group = match.lastgroup
        if group == "space":
            continue
        tokens.append(Token(_KIND_BY_GROUP[group], match.group(), match.start()))
    return tokens


def split_terms(expression: str) -> Tuple[Term, ...]:
    """
    Tokenize and arrange an expression into Terms.

    Raises:
        ParseError: On operator misuse, unbalanced parentheses or
            invalid characters
    """
    tokens = tokenize(expression)
    terms, _ = _read_terms(tokens, 0, expression, nested=False)
    return terms


def _read_terms(
    tokens: List[Token], pos: int, expression: str, nested: bool
) -> Tuple[Tuple[Term, ...], int]:
    """Read terms until the end of input or a closing parenthesis."""
    terms: List[Term] = []
    operator: Optional[TokenKind] = None
    negated = False
    not_position: Optional[int] = None

    while pos < len(tokens):
        token = tokens[pos]

        if token.kind == TokenKind.RPAREN:
            if not nested:
                raise ParseError("Unbalanced ')'", expression, token.position)
            break

        if token.kind == TokenKind.INVALID:
            raise ParseError("Invalid character in expression", expression, token.position)

        if token.kind in (TokenKind.AND, TokenKind.OR):
            if not terms:
                raise ParseError("Expression may not start with an operator", expression, token.position)
            if operator is not None or not_position is not None:
                raise ParseError("May not state two operators in a row", expression, token.position)
            operator = token.kind
            pos += 1
            continue

        if terms and operator is None:
            raise ParseError(
                "Terms must be separated by an operator", expression, token.position
            )

        if token.kind == TokenKind.NOT:
            if len(token.text) % 2:
                negated = not negated
            not_position = token.position
            pos += 1
            continue

        if token.kind == TokenKind.LPAREN:
            group, end = _read_terms(tokens, pos + 1, expression, nested=True)
            if end >= len(tokens):
                raise ParseError("Unbalanced '('", expression, token.position)
            terms.append(Term(operator, negated, None, group, token.position))
            pos = end + 1
        else:
            terms.append(Term(operator, negated, token.text, None, token.position))
            pos += 1

        operator = None
        negated = False
        not_position = None

    if not_position is not None:
        raise ParseError("'!' must be followed by a term", expression, not_position)
    if operator is not None:
        raise ParseError("Expression may not end with an operator", expression)

    return tuple(terms), pos


def _word_to_node(word: str, registry: PivotRegistry) -> Node:
    resolved = registry.try_resolve(word)
    if resolved is not None:
        pivot, choice = resolved
        return PivotChoice(pivot, choice)
    if word.lower() == "true":
        return TRUE
    if word.lower() == "false":
        return FALSE
    raise UnresolvedChoice(word)


def _terms_to_node(terms: Tuple[Term, ...], registry: PivotRegistry) -> Node:
    result: Optional[Node] = None

    for term in terms:
        if term.group is not None:
            current = _terms_to_node(term.group, registry)
        else:
            current = _word_to_node(term.word, registry)

        if term.negated:
            current = invert(current)

        if result is None:
            result = current
        elif term.operator == TokenKind.AND:
            result = AndNode(result, current)
        else:
            result = OrNode(result, current)

    return TRUE if result is None else result


def parse_expression(expression: str, registry: PivotRegistry) -> Node:
    """
    Parse condition text into an AST.

    Args:
        expression: Condition text, e.g. "x86 & !Debug"
        registry: Registry used to resolve choice names and aliases

    Returns:
        AST root. An empty expression parses to TRUE.

    Raises:
        ParseError: If the text is malformed
        UnresolvedChoice: If an atom is not a known choice, alias,
            true or false
    """
    if expression is None:
        return TRUE
    return _terms_to_node(split_terms(expression), registry)


__all__ = [
    "TokenKind",
    "Token",
    "Term",
    "tokenize",
    "split_terms",
    "parse_expression",
]

"""
Renderer: emit an expression in a template's target syntax.

Works on the author's text rather than the canonical set form, so the
output keeps the author's structure:

    "x86 & !(Debug | Profile)"

renders on the label template as:

    "x86 and not (Debug or Profile)"

Each term is joined to the text before it with the token chosen by its
pending operator state:

    none        first term (NOT prefix when negated)
    and         AND
    and-not     AND-NOT
    or          OR
    or-not      OR-NOT

Parenthesized groups render recursively and are wrapped with the
template's group format; an empty group renders as the literal true.
Choices always render by canonical name, never by the alias that was
written.
"""

from typing import Callable, List, Optional, Tuple

from pivots.backends.templates import Template
from pivots.errors import UnresolvedChoice
from pivots.parser import Term, TokenKind, split_terms
from pivots.registry import PivotRegistry

_LITERALS = ("true", "false")


def render_expression(
    expression: str,
    registry: PivotRegistry,
    template: Template,
    scope: str = "",
    on_choice: Optional[Callable[[str, str], None]] = None,
) -> str:
    """
    Render condition text with a template.

    Args:
        expression: Condition text (validated exactly as the parser does)
        registry: Registry resolving choice names and aliases
        template: Target syntax
        scope: Caller context passed through to the atom formatter
            (e.g. a project or package name)
        on_choice: Called with (pivot, choice) for every atom rendered

    Returns:
        Rendered text ("" for an empty expression)

    Raises:
        ParseError: If the text is malformed
        UnresolvedChoice: If an atom is unknown
    """
    if not expression:
        return ""
    terms = split_terms(expression)
    return _render_terms(terms, registry, template, scope, on_choice)


def _join_token(template: Template, term: Term) -> str:
    if term.operator == TokenKind.AND:
        return template.and_not if term.negated else template.and_
    return template.or_not if term.negated else template.or_


def _render_terms(
    terms: Tuple[Term, ...],
    registry: PivotRegistry,
    template: Template,
    scope: str,
    on_choice,
) -> str:
    parts: List[str] = []

    for term in terms:
        if term.group == ():
            text = "true"
        elif term.group is not None:
            text = template.group.format(
                _render_terms(term.group, registry, template, scope, on_choice)
            )
        else:
            text = _render_atom(term.word, registry, template, scope, on_choice)

        if not parts:
            parts.append(template.not_ + text if term.negated else text)
        else:
            parts.append(_join_token(template, term) + text)

    return "".join(parts)


def _render_atom(word: str, registry: PivotRegistry, template: Template, scope: str, on_choice) -> str:
    resolved = registry.try_resolve(word)
    if resolved is None:
        if word.lower() in _LITERALS:
            return word.lower()
        raise UnresolvedChoice(word)

    pivot_name, choice = resolved
    if on_choice is not None:
        on_choice(pivot_name, choice)
    return template.atom(scope, choice, registry.lookup(pivot_name))


__all__ = ["render_expression"]

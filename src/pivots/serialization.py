"""
Serialization helpers for pivot definitions and canonical expressions.

Pivot configuration is a mapping of pivot name -> pivot body:

    Platform:
      key: Platform
      description: Target platform
      choices: [Win32, x64, ARM]
      Win32:
        aliases: [x86, ia32]
    Configuration:
      choices: [Debug, Release]

A choice listed in `choices` may have its own entry (same name) with
`description`, `aliases` and `condition`. A top-level `configurations`
key is unwrapped, so whole build-script sections can be loaded as-is.

Provides dict / JSON / YAML round-trips and file loading.
"""
from __future__ import annotations

import json
import logging
import os
import warnings
from typing import Any, Dict, List

import yaml

from pivots.canonical import PivotsExpression
from pivots.errors import ConfigError
from pivots.model import ChoiceDefinition, PivotDefinition

logger = logging.getLogger(__name__)

_PIVOT_KEYS = {"key", "description", "choices"}
_CHOICE_KEYS = {"description", "aliases", "condition"}


def _as_string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, (str, int, float)) for v in value):
        return [str(v) for v in value]
    raise ConfigError(f"{where} must be a string or a list of strings")


def choice_from_dict(name: str, d: Dict[str, Any] | None, pivot: str) -> ChoiceDefinition:
    if d is None:
        return ChoiceDefinition(name=name)
    if not isinstance(d, dict):
        raise ConfigError(f"Choice '{pivot}.{name}' must be a mapping")
    unknown = set(d) - _CHOICE_KEYS
    if unknown:
        warnings.warn(f"Ignoring unknown keys for choice '{pivot}.{name}': {sorted(unknown)}", UserWarning)
    condition = d.get("condition")
    return ChoiceDefinition(
        name=name,
        description=d.get("description"),
        aliases=_as_string_list(d.get("aliases"), f"aliases of '{pivot}.{name}'"),
        condition=str(condition) if condition is not None else None,
    )


def choice_to_dict(c: ChoiceDefinition) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    if c.description is not None:
        d["description"] = c.description
    if c.aliases:
        d["aliases"] = list(c.aliases)
    if c.condition is not None:
        d["condition"] = c.condition
    return d


def pivot_from_dict(name: str, d: Dict[str, Any]) -> PivotDefinition:
    if not isinstance(d, dict):
        raise ConfigError(f"Pivot '{name}' must be a mapping")

    choice_names: List[str] = []
    for choice in _as_string_list(d.get("choices"), f"choices of '{name}'"):
        if choice not in choice_names:
            choice_names.append(choice)

    # YAML reads a bare 2010 as an int key; choice names are always strings.
    bodies = {str(key): value for key, value in d.items()}
    for extra in set(bodies) - _PIVOT_KEYS - set(choice_names):
        warnings.warn(f"Ignoring unknown key '{extra}' in pivot '{name}'", UserWarning)

    return PivotDefinition(
        name=name,
        key=d.get("key"),
        description=d.get("description"),
        choices=[choice_from_dict(c, bodies.get(c), name) for c in choice_names],
    )


def pivot_to_dict(p: PivotDefinition) -> Dict[str, Any]:
    d: Dict[str, Any] = {"choices": [c.name for c in p.choices]}
    if p.key is not None:
        d["key"] = p.key
    if p.description is not None:
        d["description"] = p.description
    for c in p.choices:
        body = choice_to_dict(c)
        if body:
            d[c.name] = body
    return d


def definitions_from_dict(d: Dict[str, Any] | None) -> List[PivotDefinition]:
    if d is None:
        return []
    if not isinstance(d, dict):
        raise ConfigError("Pivot configuration must be a mapping of pivot name to pivot")
    if set(d) == {"configurations"}:
        d = d["configurations"] or {}
        if not isinstance(d, dict):
            raise ConfigError("'configurations' must be a mapping of pivot name to pivot")
    return [pivot_from_dict(str(name), body) for name, body in d.items()]


def definitions_to_dict(definitions: List[PivotDefinition]) -> Dict[str, Any]:
    return {p.name: pivot_to_dict(p) for p in definitions}


def definitions_to_json(definitions: List[PivotDefinition]) -> str:
    return json.dumps(definitions_to_dict(definitions))


def definitions_from_json(s: str) -> List[PivotDefinition]:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON pivot configuration: {e}") from e
    return definitions_from_dict(d)


def definitions_to_yaml(definitions: List[PivotDefinition]) -> str:
    return yaml.safe_dump(definitions_to_dict(definitions), sort_keys=False)


def definitions_from_yaml(s: str) -> List[PivotDefinition]:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML pivot configuration: {e}") from e
    return definitions_from_dict(d)


def load_definitions_file(filepath: str) -> List[PivotDefinition]:
    """
    Load pivot definitions from a file.

    Args:
        filepath: Path to a .json file, or YAML otherwise

    Returns:
        Ordered pivot definitions

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the document is malformed
    """
    with open(filepath, "r", encoding="utf-8") as f:
        content = f.read()

    logger.debug("Loading pivot definitions from %s", filepath)
    if os.path.splitext(filepath)[1].lower() == ".json":
        return definitions_from_json(content)
    return definitions_from_yaml(content)


def expression_to_dict(expr: PivotsExpression) -> Dict[str, Any]:
    if expr.is_invariant:
        return {"type": "invariant", "value": expr.invariant}
    return {
        "type": "combinations",
        "relevant": list(expr.relevant),
        "combinations": [list(c) for c in expr.sorted_combinations()],
    }


def expression_from_dict(d: Dict[str, Any]) -> PivotsExpression:
    t = d.get("type")
    if t == "invariant":
        return PivotsExpression.TRUE if d["value"] else PivotsExpression.FALSE
    if t == "combinations":
        relevant = list(d["relevant"])
        return PivotsExpression.from_assignments(
            relevant, (dict(zip(relevant, c)) for c in d["combinations"])
        )
    raise TypeError(f"Unsupported expression dict type: {t}")


__all__ = [
    "definitions_from_dict",
    "definitions_to_dict",
    "definitions_from_json",
    "definitions_to_json",
    "definitions_from_yaml",
    "definitions_to_yaml",
    "load_definitions_file",
    "expression_to_dict",
    "expression_from_dict",
]

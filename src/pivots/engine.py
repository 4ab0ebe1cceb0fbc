"""
PivotEngine: the public entry point.

Owns everything a run needs:
    - the read-only PivotRegistry
    - the render cache
    - the first surface spelling seen for each canonical expression
    - the used-choice tracker

Construct one engine after the pivot definitions are known, then share
it. There is no module-level state; two engines never see each other's
caches.

Typical use:

    engine = PivotEngine.from_config_file("pivots.yaml")
    engine.build_condition("zlib", "x86 & Debug")
    engine.label("x86 & Debug")          # "x86 and Debug"
"""

import logging
import threading
from typing import Dict, FrozenSet, Iterable, Union

from pivots.backends.renderer import render_expression
from pivots.backends.templates import BUILD_CONDITION, FILENAME, LABEL, PATH, TEMPLATES, Template
from pivots.cache import CacheInfo, ChoiceUsage, RenderCache
from pivots.canonical import PivotsExpression
from pivots.evaluator import evaluate
from pivots.expressions import Node
from pivots.model import PivotDefinition
from pivots.parser import parse_expression
from pivots.registry import PivotRegistry
from pivots.serialization import load_definitions_file

logger = logging.getLogger(__name__)


class PivotEngine:
    """Parses, normalizes and renders pivot expressions against one registry."""

    def __init__(self, registry: PivotRegistry):
        self.registry = registry
        self._cache = RenderCache()
        self._usage = ChoiceUsage()
        self._surface: Dict[PivotsExpression, str] = {}
        self._surface_lock = threading.Lock()

    @classmethod
    def from_definitions(cls, definitions: Iterable[PivotDefinition]) -> "PivotEngine":
        return cls(PivotRegistry(definitions))

    @classmethod
    def from_config_file(cls, filepath: str) -> "PivotEngine":
        """Build an engine from a YAML or JSON pivot configuration file."""
        return cls.from_definitions(load_definitions_file(filepath))

    # =========================================================================
    # PARSE / EVALUATE
    # =========================================================================

    def parse(self, expression: str) -> Node:
        return parse_expression(expression, self.registry)

    def evaluate(self, expression: str) -> PivotsExpression:
        """
        Return the canonical value of condition text.

        The first text seen for each canonical value is remembered; it is
        the spelling every later render of that value uses.
        """
        node = self.parse(expression)
        value = evaluate(node, self.registry, on_choice=self._usage.mark)
        if expression:
            with self._surface_lock:
                self._surface.setdefault(value, expression)
        logger.debug("Normalized %r -> %s", expression, value)
        return value

    def normalize(self, expression: str) -> str:
        """
        Return the first spelling seen for the canonical value of the text.

        Equivalent conditions normalize to the same string, which callers
        use to deduplicate them:

            engine.normalize("x86|x64")     # "x86|x64"
            engine.normalize("x64 | x86")   # "x86|x64"
        """
        if not expression:
            return ""
        value = self.evaluate(expression)
        with self._surface_lock:
            return self._surface[value]

    # =========================================================================
    # RENDER
    # =========================================================================

    def render(self, scope: str, expression: str, template: Union[Template, str]) -> str:
        """
        Render condition text in a target syntax, memoized.

        Args:
            scope: Caller context (project or package name); part of the
                cache key and passed to the template's atom formatter
            expression: Condition text
            template: A Template or its name ("build-condition", "label",
                "path", "filename")

        Returns:
            Rendered text, "" for an empty expression
        """
        if isinstance(template, str):
            template = TEMPLATES[template]
        if not expression:
            return ""

        value = self.evaluate(expression)
        with self._surface_lock:
            surface = self._surface[value]

        return self._cache.get_or_render(
            (scope, value, template),
            lambda: render_expression(
                surface, self.registry, template, scope, on_choice=self._usage.mark
            ),
        )

    def build_condition(self, scope: str, expression: str) -> str:
        return self.render(scope, expression, BUILD_CONDITION)

    def label(self, expression: str) -> str:
        return self.render("", expression, LABEL)

    def path(self, scope: str, expression: str) -> str:
        return self.render(scope, expression, PATH)

    def filename(self, scope: str, expression: str) -> str:
        return self.render(scope, expression, FILENAME)

    # =========================================================================
    # INSTRUMENTATION
    # =========================================================================

    def used_choices(self) -> Dict[str, FrozenSet[str]]:
        """pivot -> choices referenced by any expression evaluated or rendered."""
        return self._usage.snapshot()

    def cache_info(self) -> CacheInfo:
        return self._cache.info()


__all__ = ["PivotEngine"]

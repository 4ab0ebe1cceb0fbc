"""Backends for rendering pivot expressions (build conditions, labels, paths, file names)."""

from .renderer import render_expression
from .templates import BUILD_CONDITION, FILENAME, LABEL, PATH, TEMPLATES, Template

__all__ = [
    "Template",
    "BUILD_CONDITION",
    "LABEL",
    "PATH",
    "FILENAME",
    "TEMPLATES",
    "render_expression",
]

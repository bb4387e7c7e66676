"""Scaffolder -- renders a template tree into a project directory.

Quick usage::

    from scaffold.scaffolder import Materializer

    materializer = Materializer(template_root, descriptor)
    result = materializer.materialize(builder, base_dir="/tmp/output")
"""

from scaffold.scaffolder.filters import ExclusionMatcher, compile_excludes
from scaffold.scaffolder.generator import Materializer, MaterializeResult
from scaffold.scaffolder.templates import TemplateRenderer
from scaffold.scaffolder.walker import EntryKind, TemplateEntry, walk_template

__all__ = [
    "EntryKind",
    "ExclusionMatcher",
    "MaterializeResult",
    "Materializer",
    "TemplateEntry",
    "TemplateRenderer",
    "compile_excludes",
    "walk_template",
]

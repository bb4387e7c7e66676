"""Scaffold -- generate projects from a template directory and a descriptor.

A template is a directory tree plus a ``.scaffold.toml`` descriptor declaring
typed parameters, exclude globs and post-generation notes.  File contents and
paths are rendered with Jinja2 against the resolved parameters.

Quick usage::

    from scaffold import ScaffoldOptions, Scaffolder

    Scaffolder(ScaffoldOptions(template="./template", project_name="Widget")).run()
"""

from scaffold.pipeline import ScaffoldOptions, Scaffolder, main

__all__ = [
    "ScaffoldOptions",
    "Scaffolder",
    "main",
]

__version__ = "0.1.0"

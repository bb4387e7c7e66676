"""Parameter resolution -- prompts for the values a template declares.

Quick usage::

    from scaffold.resolver import ParameterResolver, RichPrompter

    builder = ParameterResolver(RichPrompter()).resolve(
        descriptor.parameter_items(), preset_name="Widget"
    )
"""

from scaffold.resolver.parameters import ParameterSetBuilder, ResolvedParameters
from scaffold.resolver.prompter import Prompter, RichPrompter
from scaffold.resolver.resolver import NAME_PROMPT, ParameterResolver

__all__ = [
    "NAME_PROMPT",
    "ParameterResolver",
    "ParameterSetBuilder",
    "Prompter",
    "ResolvedParameters",
    "RichPrompter",
]

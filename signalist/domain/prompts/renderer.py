"""Template Renderer - substitutes {{key}} placeholders with context values"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ...exceptions import MissingPlaceholderError
from .templates import PromptTemplate

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class RenderedPrompt:
    template_name: str
    text: str


def placeholders(template: PromptTemplate) -> set[str]:
    """Return the set of placeholder keys a template requires"""
    return set(PLACEHOLDER_PATTERN.findall(template.body))


def render(template: PromptTemplate, context: Mapping[str, Any]) -> RenderedPrompt:
    """
    Fill every placeholder in the template from the context.

    Substitution is a single pass, so placeholder-like text inside context
    values is not expanded again.

    Raises:
        MissingPlaceholderError: If any placeholder has no context entry
    """
    missing = placeholders(template) - set(context.keys())
    if missing:
        raise MissingPlaceholderError(template.name, list(missing))

    text = PLACEHOLDER_PATTERN.sub(lambda match: str(context[match.group(1)]), template.body)
    return RenderedPrompt(template_name=template.name, text=text)

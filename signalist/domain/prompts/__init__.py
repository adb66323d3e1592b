"""Prompt domain - static templates and placeholder rendering"""

from .renderer import RenderedPrompt, placeholders, render
from .templates import (
    NEWS_SUMMARY,
    PROMPT_TEMPLATES,
    TRADINGVIEW_SYMBOL_MAPPING,
    WELCOME_EMAIL,
    PromptTemplate,
    get_template,
)

__all__ = [
    "NEWS_SUMMARY",
    "PROMPT_TEMPLATES",
    "TRADINGVIEW_SYMBOL_MAPPING",
    "WELCOME_EMAIL",
    "PromptTemplate",
    "RenderedPrompt",
    "get_template",
    "placeholders",
    "render",
]

"""Generation domain - generative text client and response validation"""

from .client import GeneratedContent, GenerationClient, OutputFormat
from .validation import (
    InvalidSymbolMapping,
    SymbolMapping,
    ValidSymbolMapping,
    check_news_summary,
    check_welcome_intro,
    validate_symbol_mapping,
)

__all__ = [
    "GeneratedContent",
    "GenerationClient",
    "InvalidSymbolMapping",
    "OutputFormat",
    "SymbolMapping",
    "ValidSymbolMapping",
    "check_news_summary",
    "check_welcome_intro",
    "validate_symbol_mapping",
]

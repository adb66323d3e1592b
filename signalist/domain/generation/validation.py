"""
Validation of generated content
Strict JSON schema check for symbol mapping and format checks for email HTML
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Union

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

SYMBOL_MAPPING_KEYS = frozenset({"tradingViewSymbol", "confidence", "reasoning"})
CONFIDENCE_LEVELS = frozenset({"high", "medium", "low"})

# The email header already greets the user
FORBIDDEN_INTRO_OPENINGS = ("welcome", "willkommen")

WELCOME_MIN_WORDS = 35
WELCOME_MAX_WORDS = 50
WELCOME_SENTENCES = 2
WELCOME_PARAGRAPH_CLASS = "mobile-text"
TAKEAWAY_LABEL = "Fazit"
NEWS_MIN_BULLETS = 3

_FENCE_PATTERN = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_SENTENCE_END_PATTERN = re.compile(r"[.!?]+(?=\s|$)")


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole reply"""
    match = _FENCE_PATTERN.match(text)
    return match.group(1).strip() if match else text.strip()


# ============================================
# Symbol mapping (JSON)
# ============================================


@dataclass(frozen=True)
class SymbolMapping:
    trading_view_symbol: str
    confidence: str
    reasoning: str


@dataclass(frozen=True)
class ValidSymbolMapping:
    mapping: SymbolMapping
    is_valid: bool = field(default=True, init=False)


@dataclass(frozen=True)
class InvalidSymbolMapping:
    reason: str
    is_valid: bool = field(default=False, init=False)


SymbolMappingValidation = Union[ValidSymbolMapping, InvalidSymbolMapping]


def validate_symbol_mapping(raw: str) -> SymbolMappingValidation:
    """
    Check a generated symbol-mapping reply.

    The reply must be a JSON object with exactly the keys tradingViewSymbol,
    confidence and reasoning. confidence must be high, medium or low.

    Returns:
        ValidSymbolMapping with parsed fields, or InvalidSymbolMapping with a reason
    """
    try:
        data = json.loads(strip_code_fence(raw))
    except (TypeError, ValueError) as e:
        return InvalidSymbolMapping(f"Reply is not valid JSON: {e}")

    if not isinstance(data, dict):
        return InvalidSymbolMapping(f"Expected a JSON object, got {type(data).__name__}")

    keys = set(data.keys())
    missing = SYMBOL_MAPPING_KEYS - keys
    if missing:
        return InvalidSymbolMapping(f"Missing keys: {', '.join(sorted(missing))}")
    extra = keys - SYMBOL_MAPPING_KEYS
    if extra:
        return InvalidSymbolMapping(f"Unexpected keys: {', '.join(sorted(extra))}")

    symbol = data["tradingViewSymbol"]
    if not isinstance(symbol, str) or not symbol.strip():
        return InvalidSymbolMapping("tradingViewSymbol must be a non-empty string")

    confidence = data["confidence"]
    if not isinstance(confidence, str) or confidence not in CONFIDENCE_LEVELS:
        return InvalidSymbolMapping(f"Invalid confidence value: {confidence!r}")

    reasoning = data["reasoning"]
    if not isinstance(reasoning, str) or not reasoning.strip():
        return InvalidSymbolMapping("reasoning must be a non-empty string")

    return ValidSymbolMapping(
        SymbolMapping(
            trading_view_symbol=symbol.strip(),
            confidence=confidence,
            reasoning=reasoning.strip(),
        )
    )


# ============================================
# Email HTML format checks
# ============================================


@dataclass
class FormatCheck:
    """Outcome of an HTML format check. Errors are fatal, warnings are logged."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _top_level_tags(soup: BeautifulSoup) -> list[Tag]:
    return [child for child in soup.children if isinstance(child, Tag)]


def check_welcome_intro(html: str) -> FormatCheck:
    """Check a generated welcome paragraph against the welcome email layout rules"""
    check = FormatCheck()
    soup = BeautifulSoup(html, "html.parser")

    tags = _top_level_tags(soup)
    stray_text = "".join(
        str(child) for child in soup.children if not isinstance(child, Tag)
    ).strip()
    if len(tags) != 1 or tags[0].name != "p" or stray_text:
        check.errors.append("Expected exactly one <p> paragraph")
        return check

    paragraph = tags[0]
    text = paragraph.get_text(" ", strip=True)
    if not text:
        check.errors.append("Paragraph is empty")
        return check

    if text.lower().startswith(FORBIDDEN_INTRO_OPENINGS):
        check.errors.append("Paragraph must not open with a welcome greeting")

    if WELCOME_PARAGRAPH_CLASS not in paragraph.get("class", []) or not paragraph.get("style"):
        check.errors.append(
            f"Paragraph must use the '{WELCOME_PARAGRAPH_CLASS}' class with inline styles"
        )

    words = len(text.split())
    if not WELCOME_MIN_WORDS <= words <= WELCOME_MAX_WORDS:
        check.errors.append(
            f"Paragraph has {words} words (expected {WELCOME_MIN_WORDS}-{WELCOME_MAX_WORDS})"
        )

    if paragraph.find("strong") is None:
        check.errors.append("No <strong> emphasis on personalized terms")

    # Abbreviations like "z. B." and ordinals like "1." end in a period,
    # so the count is approximate and only logged
    sentences = len(_SENTENCE_END_PATTERN.findall(text))
    if sentences != WELCOME_SENTENCES:
        check.warnings.append(f"Paragraph has {sentences} sentences (expected {WELCOME_SENTENCES})")

    return check


def _has_takeaway(article: Tag) -> bool:
    """A <p> outside the bullet list whose <strong> label starts with Fazit"""
    for paragraph in article.find_all("p"):
        if paragraph.find_parent("li") is not None:
            continue
        for label in paragraph.find_all("strong"):
            if label.get_text(strip=True).startswith(TAKEAWAY_LABEL):
                return True
    return False


def check_news_summary(html: str) -> FormatCheck:
    """Check a generated news summary against the news email layout rules"""
    check = FormatCheck()
    soup = BeautifulSoup(html, "html.parser")

    headings = [h.get_text(" ", strip=True) for h in soup.find_all("h3")]
    if not headings:
        check.errors.append("No section headings (<h3>) found")

    seen = set()
    for heading in headings:
        if heading in seen:
            check.errors.append(f"Duplicate section heading: {heading}")
        seen.add(heading)

    articles = soup.find_all("div", class_="dark-info-box")
    if not articles:
        check.errors.append("No article containers found")

    for index, article in enumerate(articles, start=1):
        title = article.find("h4")
        label = title.get_text(" ", strip=True) if title else f"article {index}"
        if title is None:
            check.errors.append(f"Article {index} has no title")

        bullets = article.find_all("li")
        if len(bullets) < NEWS_MIN_BULLETS:
            check.errors.append(
                f"'{label}' has {len(bullets)} bullet points (minimum {NEWS_MIN_BULLETS})"
            )

        if not _has_takeaway(article):
            check.errors.append(f"'{label}' has no takeaway box")

        links = [
            a for a in article.find_all("a", href=True) if a["href"].startswith(("http://", "https://"))
        ]
        if not links:
            check.errors.append(f"'{label}' has no read-more link")

    return check


def log_format_warnings(task: str, check: FormatCheck) -> None:
    for warning in check.warnings:
        logger.warning(f"⚠️ {task} format: {warning}")

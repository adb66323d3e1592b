"""
Tests for generated content validation.

Tests:
- Symbol mapping schema check
- Welcome intro format rules
- News summary format rules
"""

import json

from conftest import NEWS_SUMMARY_HTML, WELCOME_INTRO_HTML

from signalist.domain.generation.validation import (
    check_news_summary,
    check_welcome_intro,
    strip_code_fence,
    validate_symbol_mapping,
)

INTRO_STYLE = "margin: 0 0 30px 0; font-size: 16px; line-height: 1.6; color: #CCDADC;"

VALID_MAPPING = {
    "tradingViewSymbol": "NASDAQ:AAPL",
    "confidence": "high",
    "reasoning": "Apple wird an der NASDAQ als AAPL gehandelt",
}


class TestSymbolMapping:
    """Tests for the strict symbol mapping schema."""

    def test_valid_mapping(self):
        result = validate_symbol_mapping(json.dumps(VALID_MAPPING))

        assert result.is_valid
        assert result.mapping.trading_view_symbol == "NASDAQ:AAPL"
        assert result.mapping.confidence == "high"

    def test_fenced_mapping_is_accepted(self):
        raw = "```json\n" + json.dumps(VALID_MAPPING) + "\n```"
        assert validate_symbol_mapping(raw).is_valid

    def test_missing_key_rejected(self):
        data = {k: v for k, v in VALID_MAPPING.items() if k != "reasoning"}
        result = validate_symbol_mapping(json.dumps(data))

        assert not result.is_valid
        assert "reasoning" in result.reason

    def test_extra_key_rejected(self):
        data = {**VALID_MAPPING, "exchange": "NASDAQ"}
        result = validate_symbol_mapping(json.dumps(data))

        assert not result.is_valid
        assert "exchange" in result.reason

    def test_unknown_confidence_rejected(self):
        data = {**VALID_MAPPING, "confidence": "extreme"}
        result = validate_symbol_mapping(json.dumps(data))

        assert not result.is_valid
        assert "extreme" in result.reason

    def test_list_confidence_rejected(self):
        data = {**VALID_MAPPING, "confidence": ["high"]}
        result = validate_symbol_mapping(json.dumps(data))

        assert not result.is_valid
        assert "confidence" in result.reason

    def test_object_confidence_rejected(self):
        data = {**VALID_MAPPING, "confidence": {"level": "high"}}
        assert not validate_symbol_mapping(json.dumps(data)).is_valid

    def test_non_json_rejected(self):
        assert not validate_symbol_mapping("NASDAQ:AAPL").is_valid

    def test_array_rejected(self):
        assert not validate_symbol_mapping(json.dumps([VALID_MAPPING])).is_valid

    def test_empty_symbol_rejected(self):
        data = {**VALID_MAPPING, "tradingViewSymbol": "  "}
        assert not validate_symbol_mapping(json.dumps(data)).is_valid


class TestStripCodeFence:
    def test_plain_text_untouched(self):
        assert strip_code_fence("  <p>Hi</p> ") == "<p>Hi</p>"

    def test_html_fence_removed(self):
        assert strip_code_fence("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"


class TestWelcomeIntro:
    """Tests for welcome intro format rules."""

    def test_reference_intro_passes(self):
        check = check_welcome_intro(WELCOME_INTRO_HTML)
        assert check.ok, check.errors

    def test_willkommen_opening_rejected(self):
        check = check_welcome_intro("<p>Willkommen bei Signalist! Schön, dass du da bist.</p>")
        assert not check.ok

    def test_welcome_opening_rejected_case_insensitive(self):
        check = check_welcome_intro("<p>WELCOME to Signalist. Glad you are here.</p>")
        assert not check.ok

    def test_two_paragraphs_rejected(self):
        check = check_welcome_intro("<p>Erster Absatz.</p><p>Zweiter Absatz.</p>")
        assert not check.ok

    def test_stray_text_rejected(self):
        check = check_welcome_intro("Hier ist dein Text: <p>Danke fürs Mitmachen.</p>")
        assert not check.ok

    def test_empty_paragraph_rejected(self):
        assert not check_welcome_intro("<p>   </p>").ok

    def test_short_intro_rejected(self):
        check = check_welcome_intro(
            f'<p class="mobile-text" style="{INTRO_STYLE}">'
            "Danke fürs <strong>Mitmachen</strong>. Viel Erfolg!</p>"
        )

        assert not check.ok
        assert any("words" in e for e in check.errors)

    def test_long_intro_rejected(self):
        html = WELCOME_INTRO_HTML.replace(
            "werden.</p>", "werden, " + "und noch mehr " * 6 + "Einblicke bekommen.</p>"
        )
        check = check_welcome_intro(html)

        assert not check.ok
        assert any("words" in e for e in check.errors)

    def test_missing_emphasis_rejected(self):
        html = WELCOME_INTRO_HTML.replace("<strong>", "").replace("</strong>", "")
        check = check_welcome_intro(html)

        assert not check.ok
        assert any("<strong>" in e for e in check.errors)

    def test_missing_paragraph_class_rejected(self):
        html = WELCOME_INTRO_HTML.replace('class="mobile-text" ', "")
        check = check_welcome_intro(html)

        assert not check.ok
        assert any("mobile-text" in e for e in check.errors)

    def test_missing_inline_style_rejected(self):
        html = WELCOME_INTRO_HTML.replace(f' style="{INTRO_STYLE}"', "")
        assert not check_welcome_intro(html).ok

    def test_sentence_count_only_warns(self):
        html = WELCOME_INTRO_HTML.replace(", und wir helfen dir dabei,", ". Wir helfen dir dabei,")
        check = check_welcome_intro(html)

        assert check.ok, check.errors
        assert any("sentences" in w for w in check.warnings)


class TestNewsSummary:
    """Tests for news summary format rules."""

    def test_reference_summary_passes(self):
        check = check_news_summary(NEWS_SUMMARY_HTML)
        assert check.ok, check.errors

    def test_missing_heading_rejected(self):
        html = NEWS_SUMMARY_HTML.replace("<h3", "<h5").replace("</h3>", "</h5>")
        assert not check_news_summary(html).ok

    def test_duplicate_headings_rejected(self):
        html = NEWS_SUMMARY_HTML + NEWS_SUMMARY_HTML
        check = check_news_summary(html)

        assert not check.ok
        assert any("Duplicate" in e for e in check.errors)

    def test_too_few_bullets_rejected(self):
        html = NEWS_SUMMARY_HTML.replace("<li>Services wachsen schnell.</li>", "")
        assert not check_news_summary(html).ok

    def test_missing_takeaway_rejected(self):
        html = NEWS_SUMMARY_HTML.replace("Fazit", "Hinweis")
        assert not check_news_summary(html).ok

    def test_missing_link_rejected(self):
        html = NEWS_SUMMARY_HTML.replace("https://example.com/apple", "/apple")
        assert not check_news_summary(html).ok

    def test_missing_article_title_rejected(self):
        html = NEWS_SUMMARY_HTML.replace("<h4", "<span").replace("</h4>", "</span>")
        assert not check_news_summary(html).ok

    def test_no_articles_rejected(self):
        assert not check_news_summary("<h3>📊 Marktüberblick</h3><p>Ruhiger Tag.</p>").ok

    def test_takeaway_word_in_bullet_rejected(self):
        html = NEWS_SUMMARY_HTML.replace(
            "<p>💡 <strong>Fazit:</strong> Apple bleibt eine solide Aktie.</p>", ""
        ).replace("<li>Services wachsen schnell.</li>", "<li>Fazit: Services wachsen schnell.</li>")
        check = check_news_summary(html)

        assert not check.ok
        assert any("takeaway" in e for e in check.errors)

    def test_takeaway_label_inside_bullet_rejected(self):
        html = NEWS_SUMMARY_HTML.replace(
            "<p>💡 <strong>Fazit:</strong> Apple bleibt eine solide Aktie.</p>", ""
        ).replace(
            "<li>Services wachsen schnell.</li>",
            "<li><p><strong>Fazit:</strong> Services wachsen schnell.</p></li>",
        )
        assert not check_news_summary(html).ok

"""
Tests for email layouts and sending.
"""

from unittest.mock import patch

import pytest

from signalist import email_service
from signalist.email_templates import (
    delete_account_confirmation_template,
    news_summary_email_template,
    welcome_email_template,
)
from signalist.exceptions import ExternalServiceError


class TestTemplates:
    def test_welcome_owns_header_and_embeds_intro(self):
        mjml = welcome_email_template("Max <Mustermann>", "<p>Danke fürs Mitmachen.</p>")

        assert "Welcome aboard Max &lt;Mustermann&gt;" in mjml
        assert "<p>Danke fürs Mitmachen.</p>" in mjml

    def test_news_summary_embeds_sections(self):
        mjml = news_summary_email_template("June 10, 2024", "<h3>📊 Marktüberblick</h3>")

        assert "June 10, 2024" in mjml
        assert "<h3>📊 Marktüberblick</h3>" in mjml

    def test_delete_confirmation_links_to_action(self):
        mjml = delete_account_confirmation_template("https://signalist.test/action?oobCode=abc")
        assert "https://signalist.test/action?oobCode=abc" in mjml


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self):
        with patch.object(email_service, "RESEND_API_KEY", None), patch.object(
            email_service, "compile_mjml_to_html", return_value="<html></html>"
        ):
            with pytest.raises(ExternalServiceError):
                await email_service.send_email("max@example.com", "Hi", "<mjml></mjml>")

    @pytest.mark.asyncio
    async def test_sends_compiled_html(self):
        with patch.object(email_service, "RESEND_API_KEY", "re_test"), patch.object(
            email_service, "compile_mjml_to_html", return_value="<html>ok</html>"
        ), patch.object(email_service.resend.Emails, "send", return_value={"id": "email-1"}) as send:
            response = await email_service.send_welcome_email(
                "max@example.com", "Max", "<p>Danke.</p>"
            )

        assert response == {"id": "email-1"}
        params = send.call_args.args[0]
        assert params["to"] == ["max@example.com"]
        assert params["html"] == "<html>ok</html>"

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self):
        with patch.object(email_service, "RESEND_API_KEY", "re_test"), patch.object(
            email_service, "compile_mjml_to_html", return_value="<html>ok</html>"
        ), patch.object(email_service.resend.Emails, "send", side_effect=RuntimeError("rate limited")):
            with pytest.raises(ExternalServiceError):
                await email_service.send_news_summary_email("max@example.com", "June 10, 2024", "<h3/>")

"""
Email Service using Resend
Compiles MJML layouts to HTML and sends them through the Resend API
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import (
    delete_account_confirmation_template,
    news_summary_email_template,
    welcome_email_template,
)
from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a mapping with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        if getattr(result, "errors", None):
            logger.warning(f"MJML compilation warnings: {result.errors}")
        return getattr(result, "html", str(result))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise ExternalServiceError(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or EMAIL_FROM_ADDRESS

    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise ExternalServiceError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise ExternalServiceError(f"Failed to send email: {str(e)}") from e


# ============================================
# Pre-built emails for notification events
# ============================================


async def send_welcome_email(to: str, name: str, intro_html: str) -> dict:
    """Send the personalized welcome email to a new user"""
    return await send_email(
        to=to,
        subject="Welcome to Signalist - your stock market toolkit is ready!",
        mjml_content=welcome_email_template(name, intro_html),
    )


async def send_news_summary_email(to: str, date: str, news_html: str) -> dict:
    """Send the daily market news summary"""
    return await send_email(
        to=to,
        subject=f"📈 Market News Summary Today - {date}",
        mjml_content=news_summary_email_template(date, news_html),
    )


async def send_delete_account_confirmation(to: str, confirm_url: str) -> dict:
    """Send the link that confirms a requested account deletion"""
    return await send_email(
        to=to,
        subject="Confirm your Signalist account deletion",
        mjml_content=delete_account_confirmation_template(confirm_url),
    )

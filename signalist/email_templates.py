"""
MJML Email Templates
Email layouts with substitution points for generated content
"""

from html import escape
from typing import Optional

from .config import APP_BASE_URL

# Signalist dark theme
THEME = {
    "primary": "#FDD458",
    "background": "#050505",
    "card_bg": "#141414",
    "text_primary": "#FFFFFF",
    "text_secondary": "#CCDADC",
    "text_muted": "#9095A1",
    "border": "#30333A",
    "danger": "#EF4444",
}

LOGO_URL = f"{APP_BASE_URL}/assets/icons/logo.svg"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    cta_color: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="0 40px 40px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{cta_color or THEME['primary']}"
              color="#000000"
              font-weight="600"
              border-radius="8px"
              padding="0"
              inner-padding="14px 28px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header with Logo -->
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 0 40px">
          <mj-column>
            <mj-image src="{LOGO_URL}" alt="Signalist" width="150px" align="left" href="{APP_BASE_URL}" padding="0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 24px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['primary']}" line-height="1.3" padding="0 0 24px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              <a href="{APP_BASE_URL}/settings" style="color: {THEME['text_muted']}; text-decoration: underline;">Unsubscribe</a>
              <span style="margin: 0 8px;">•</span>
              <a href="{APP_BASE_URL}" style="color: {THEME['text_muted']}; text-decoration: underline;">Visit Signalist</a>
            </mj-text>
            <mj-text align="center" font-size="12px" color="{THEME['text_muted']}" padding="12px 0 0 0">
              © 2025 Signalist
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def welcome_email_template(name: str, intro_html: str) -> str:
    """Welcome email. intro_html is the generated paragraph placed under the header."""
    content = f"""
    <mj-text padding="0 0 8px 0">
      {intro_html}
    </mj-text>

    <mj-text font-weight="600" color="{THEME['text_primary']}">
      Here's what you can do right now:
    </mj-text>

    <mj-text padding="0 0 0 20px">
      • Set up your watchlist to follow your favorite stocks<br/>
      • Create price and volume alerts so you never miss a move<br/>
      • Explore the dashboard for trends and the latest market news
    </mj-text>

    <mj-text>
      We'll keep you informed with timely, concise updates (no noise, no spam).
    </mj-text>
    """

    return get_base_template(
        title=f"Welcome aboard {escape(name)}",
        preview_text="Your Signalist account is ready",
        content_sections=content,
        cta_url=f"{APP_BASE_URL}/",
        cta_label="Go to Dashboard",
    )


def news_summary_email_template(date: str, news_html: str) -> str:
    """Daily market news summary. news_html is the generated section markup."""
    content = f"""
    <mj-text color="{THEME['text_muted']}" font-size="14px" padding="0 0 16px 0">
      {escape(date)}
    </mj-text>

    <mj-text padding="0">
      {news_html}
    </mj-text>
    """

    return get_base_template(
        title="Market News Summary Today",
        preview_text=f"Your market news for {escape(date)}",
        content_sections=content,
        cta_url=f"{APP_BASE_URL}/",
        cta_label="Open Signalist",
    )


def delete_account_confirmation_template(confirm_url: str) -> str:
    """Account deletion confirmation (second phase of the two-phase delete)"""
    content = f"""
    <mj-text>
      We received a request to permanently delete your Signalist account.
    </mj-text>

    <mj-text>
      Deleting your account removes your watchlists, your price and volume alerts,
      your settings and all personal data associated with your account. This cannot be undone.
    </mj-text>

    <mj-text font-size="13px" color="{THEME['text_muted']}">
      If you didn't request this, you can safely ignore this email. Your account will stay active.
    </mj-text>
    """

    return get_base_template(
        title="Confirm Account Deletion",
        preview_text="Confirm that you want to delete your Signalist account",
        content_sections=content,
        cta_url=confirm_url,
        cta_label="Delete My Account",
        cta_color=THEME["danger"],
    )

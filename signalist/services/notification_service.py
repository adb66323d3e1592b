"""
Notification Service
Turns domain events into personalized emails: welcome intros and daily news summaries
"""

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from ..domain.events.dispatcher import EventDispatcher
from ..domain.events.schemas import (
    NEWS_SUMMARY_REQUESTED,
    USER_CREATED,
    DomainEvent,
    news_summary_key,
)
from ..domain.generation.client import GenerationClient, OutputFormat
from ..domain.generation.validation import (
    FormatCheck,
    check_news_summary,
    check_welcome_intro,
    log_format_warnings,
)
from ..domain.prompts import NEWS_SUMMARY, WELCOME_EMAIL, get_template, render
from ..domain.users.repository import UserRepository
from ..email_service import send_news_summary_email, send_welcome_email
from ..exceptions import MalformedResponseError
from .finnhub_service import FinnhubClient

logger = logging.getLogger(__name__)


class ContentRejectedError(MalformedResponseError):
    """Generated content failed the hard format rules for its email"""

    def __init__(self, task: str, check: FormatCheck):
        self.errors = check.errors
        super().__init__(f"{task} content rejected: {'; '.join(check.errors)}")


def format_user_profile(data: dict[str, Any]) -> str:
    """Profile block substituted into the welcome prompt"""
    return "\n".join(
        [
            f"- Name: {data.get('name') or 'Unknown'}",
            f"- Country: {data.get('country') or 'Unknown'}",
            f"- Investment goals: {data.get('investmentGoals') or 'Unknown'}",
            f"- Risk tolerance: {data.get('riskTolerance') or 'Unknown'}",
            f"- Preferred industry: {data.get('preferredIndustry') or 'Unknown'}",
        ]
    )


def format_summary_date(now: datetime) -> str:
    return now.strftime("%B %d, %Y")


class NotificationOrchestrator:
    """Handles delivered events. One failing event never affects another."""

    def __init__(
        self,
        generation_client: GenerationClient,
        news_source: FinnhubClient,
        welcome_email_func: Callable[..., Awaitable[Any]] = send_welcome_email,
        news_email_func: Callable[..., Awaitable[Any]] = send_news_summary_email,
    ):
        self.generation_client = generation_client
        self.news_source = news_source
        self.welcome_email_func = welcome_email_func
        self.news_email_func = news_email_func

    async def handle(self, event: DomainEvent) -> dict[str, Any]:
        """Process one event and report the outcome. Never raises."""
        try:
            if event.name == USER_CREATED:
                return await self._send_welcome(event)
            if event.name == NEWS_SUMMARY_REQUESTED:
                return await self._send_news_summary(event)
        except Exception as e:
            logger.error(f"❌ Notification for {event.name} ({event.id}) failed: {e}")
            return {"status": "failed", "event_id": event.id, "error": str(e)}

        logger.warning(f"⚠️ Ignoring unknown event {event.name} ({event.id})")
        return {"status": "ignored", "event_id": event.id}

    async def _send_welcome(self, event: DomainEvent) -> dict[str, Any]:
        data = event.data
        email = data.get("email")
        if not email:
            raise ValueError("user.created event has no email")

        prompt = render(get_template(WELCOME_EMAIL), {"userProfile": format_user_profile(data)})
        content = await self.generation_client.generate(prompt, OutputFormat.HTML)

        check = check_welcome_intro(content.text)
        log_format_warnings("welcome intro", check)
        if not check.ok:
            raise ContentRejectedError("welcome intro", check)

        name = data.get("name") or "there"
        await self.welcome_email_func(to=email, name=name, intro_html=content.text)
        logger.info(f"✅ Welcome email sent to {email}")
        return {"status": "sent", "event_id": event.id, "email": email}

    async def _send_news_summary(self, event: DomainEvent) -> dict[str, Any]:
        data = event.data
        email = data.get("email")
        if not email:
            raise ValueError("news.summary.requested event has no email")

        articles = await self.news_source.get_news(data.get("symbols") or [])
        if not articles:
            logger.info(f"No news available for {email}, skipping summary")
            return {"status": "skipped", "event_id": event.id, "reason": "no_articles"}

        news_data = json.dumps(
            [article.model_dump(exclude_none=True) for article in articles],
            ensure_ascii=False,
            indent=2,
        )
        prompt = render(get_template(NEWS_SUMMARY), {"newsData": news_data})
        content = await self.generation_client.generate(prompt, OutputFormat.HTML)

        check = check_news_summary(content.text)
        log_format_warnings("news summary", check)
        if not check.ok:
            raise ContentRejectedError("news summary", check)

        await self.news_email_func(
            to=email,
            date=format_summary_date(datetime.now(timezone.utc)),
            news_html=content.text,
        )
        logger.info(f"✅ News summary sent to {email} ({len(articles)} articles)")
        return {
            "status": "sent",
            "event_id": event.id,
            "email": email,
            "articles": len(articles),
        }


def register_handlers(dispatcher: EventDispatcher, orchestrator: NotificationOrchestrator) -> None:
    dispatcher.on_event(USER_CREATED, orchestrator.handle)
    dispatcher.on_event(NEWS_SUMMARY_REQUESTED, orchestrator.handle)


async def publish_daily_news_summaries(dispatcher: EventDispatcher, db: Session) -> dict[str, int]:
    """
    Publish one news summary request per user, carrying their watchlist symbols.

    Each request is keyed by user and UTC day, so a second run on the same day
    queues nothing new while the first jobs are retained.
    """
    users = UserRepository.get_users_for_news_email(db)
    today = datetime.now(timezone.utc).date()
    published = 0
    duplicates = 0
    failed = 0

    for user in users:
        result = await dispatcher.publish(
            NEWS_SUMMARY_REQUESTED,
            {
                "email": user.email,
                "name": user.full_name,
                "symbols": UserRepository.get_watchlist_symbols(user),
            },
            idempotency_key=news_summary_key(user.id, today),
        )
        if not result.success:
            failed += 1
        elif result.duplicate:
            duplicates += 1
        else:
            published += 1

    logger.info(
        f"📰 Daily news summaries: published {published}, already queued {duplicates}, failed {failed}"
    )
    return {"published": published, "duplicates": duplicates, "failed": failed}

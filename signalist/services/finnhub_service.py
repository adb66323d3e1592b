"""
Finnhub Service
Market news aggregation and company profile lookup over the Finnhub REST API
"""

import logging
from datetime import date, timedelta
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from ..config import FINNHUB_API_KEY, FINNHUB_BASE_URL
from ..exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

NEWS_LOOKBACK_DAYS = 5
MAX_ARTICLES = 6
MAX_ROUNDS = 6


class NewsArticle(BaseModel):
    id: Optional[int] = None
    headline: str
    summary: str
    source: Optional[str] = None
    url: str
    datetime: int
    category: Optional[str] = None
    related: Optional[str] = None
    image: Optional[str] = None


def is_valid_article(article: dict) -> bool:
    """An article is usable when it has headline, summary, url and timestamp"""
    return bool(
        article.get("headline")
        and article.get("summary")
        and article.get("url")
        and article.get("datetime")
    )


def clean_symbols(symbols: Optional[list[str]]) -> list[str]:
    """Trim, upper-case and dedupe ticker symbols, keeping their order"""
    cleaned: list[str] = []
    for symbol in symbols or []:
        value = (symbol or "").strip().upper()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


class FinnhubClient:
    """Async client for the Finnhub endpoints used by notifications"""

    def __init__(
        self,
        api_key: Optional[str] = FINNHUB_API_KEY,
        base_url: str = FINNHUB_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _fetch_json(self, path: str, params: dict[str, Any]) -> Any:
        if not self.api_key:
            logger.error("❌ FINNHUB_API_KEY not configured")
            raise ExternalServiceError("Finnhub not configured")

        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)

        try:
            response = await self._http_client.get(
                f"{self.base_url}{path}", params={**params, "token": self.api_key}
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Finnhub request to {path} failed: {e}")
            raise ExternalServiceError(f"Finnhub request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"❌ Finnhub {path} returned HTTP {response.status_code}")
            raise ExternalServiceError(f"Finnhub returned HTTP {response.status_code}")

        return response.json()

    async def get_company_profile(self, symbol: str) -> dict:
        """Company profile (name, exchange, currency, country) for a ticker"""
        profile = await self._fetch_json("/stock/profile2", {"symbol": symbol.strip().upper()})
        return profile if isinstance(profile, dict) else {}

    async def _company_news(self, symbol: str, start: date, end: date) -> list[dict]:
        try:
            articles = await self._fetch_json(
                "/company-news",
                {"symbol": symbol, "from": start.isoformat(), "to": end.isoformat()},
            )
        except ExternalServiceError as e:
            logger.warning(f"⚠️ Skipping company news for {symbol}: {e}")
            return []
        if not isinstance(articles, list):
            return []
        return [a for a in articles if isinstance(a, dict) and is_valid_article(a)]

    async def _general_news(self, max_articles: int) -> list[NewsArticle]:
        articles = await self._fetch_json("/news", {"category": "general"})
        seen = set()
        unique: list[NewsArticle] = []
        for article in articles if isinstance(articles, list) else []:
            if not isinstance(article, dict) or not is_valid_article(article):
                continue
            key = (article.get("id"), article.get("url"), article.get("headline"))
            if key in seen:
                continue
            seen.add(key)
            unique.append(NewsArticle(**article))
            if len(unique) >= max_articles:
                break
        return unique

    async def get_news(
        self, symbols: Optional[list[str]] = None, max_articles: int = MAX_ARTICLES
    ) -> list[NewsArticle]:
        """
        Aggregate recent news.

        With symbols, company news from the last few days is picked round-robin
        across symbols so one busy ticker cannot crowd out the rest. Falls back
        to general market news when there are no symbols or no company news.
        """
        cleaned = clean_symbols(symbols)

        if cleaned:
            end = date.today()
            start = end - timedelta(days=NEWS_LOOKBACK_DAYS)
            per_symbol = {symbol: await self._company_news(symbol, start, end) for symbol in cleaned}

            collected: list[NewsArticle] = []
            for round_index in range(MAX_ROUNDS):
                for symbol in cleaned:
                    articles = per_symbol[symbol]
                    if round_index >= len(articles):
                        continue
                    article = dict(articles[round_index])
                    article.setdefault("related", symbol)
                    collected.append(NewsArticle(**article))
                    if len(collected) >= max_articles:
                        break
                if len(collected) >= max_articles:
                    break

            if collected:
                collected.sort(key=lambda a: a.datetime, reverse=True)
                logger.info(f"📰 Collected {len(collected)} articles for {len(cleaned)} symbols")
                return collected[:max_articles]

            logger.info("No company news found for watchlist, falling back to general news")

        general = await self._general_news(max_articles)
        logger.info(f"📰 Collected {len(general)} general market articles")
        return general

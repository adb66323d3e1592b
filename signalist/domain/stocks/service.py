"""Stock service - maps Finnhub tickers to TradingView symbols"""

import logging

from ...exceptions import ExternalServiceError
from ...services.finnhub_service import FinnhubClient
from ..generation.client import GenerationClient, OutputFormat
from ..generation.validation import SymbolMapping
from ..prompts import TRADINGVIEW_SYMBOL_MAPPING, get_template, render

logger = logging.getLogger(__name__)


class SymbolMappingService:
    def __init__(self, generation_client: GenerationClient, news_source: FinnhubClient):
        self.generation_client = generation_client
        self.news_source = news_source

    async def _profile_context(self, symbol: str) -> dict[str, str]:
        try:
            profile = await self.news_source.get_company_profile(symbol)
        except ExternalServiceError as e:
            # Mapping still works from the bare ticker
            logger.warning(f"⚠️ No company profile for {symbol}: {e}")
            profile = {}

        return {
            "symbol": symbol,
            "company": profile.get("name") or symbol,
            "exchange": profile.get("exchange") or "Unknown",
            "currency": profile.get("currency") or "Unknown",
            "country": profile.get("country") or "Unknown",
        }

    async def resolve(self, symbol: str) -> SymbolMapping:
        """
        Resolve the TradingView symbol for a ticker.

        Raises:
            GenerationUnavailableError: Generation service unreachable
            MalformedResponseError: Reply did not match the mapping schema
        """
        context = await self._profile_context(symbol)
        prompt = render(get_template(TRADINGVIEW_SYMBOL_MAPPING), context)
        content = await self.generation_client.generate(prompt, OutputFormat.SYMBOL_MAPPING_JSON)

        mapping = content.symbol_mapping
        logger.info(
            f"🔎 Mapped {symbol} -> {mapping.trading_view_symbol} ({mapping.confidence})"
        )
        return mapping

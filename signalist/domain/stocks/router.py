"""Stock router - FastAPI endpoints for symbol lookups"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ...auth import AuthSession, get_current_session
from ...exceptions import ExternalServiceError, MalformedResponseError
from ...shared.validators import validate_symbol
from .schemas import TradingViewSymbolResponse
from .service import SymbolMappingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stocks", tags=["Stocks"])


def get_symbol_mapping_service(request: Request) -> SymbolMappingService:
    """Dependency injection for SymbolMappingService"""
    return SymbolMappingService(request.app.state.generation_client, request.app.state.news_source)


@router.get("/{symbol}/tradingview", response_model=TradingViewSymbolResponse)
async def get_tradingview_symbol(
    symbol: str,
    session: AuthSession = Depends(get_current_session),
    service: SymbolMappingService = Depends(get_symbol_mapping_service),
):
    """Resolve the TradingView chart symbol for a ticker"""
    try:
        ticker = validate_symbol(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        mapping = await service.resolve(ticker)
    except MalformedResponseError as e:
        logger.error(f"❌ Malformed symbol mapping for {ticker}: {e}")
        raise HTTPException(status_code=502, detail="Symbol mapping reply was malformed") from e
    except ExternalServiceError as e:
        logger.error(f"❌ Symbol mapping unavailable for {ticker}: {e}")
        raise HTTPException(status_code=503, detail="Symbol mapping service unavailable") from e

    return TradingViewSymbolResponse(
        symbol=ticker,
        tradingViewSymbol=mapping.trading_view_symbol,
        confidence=mapping.confidence,
        reasoning=mapping.reasoning,
    )

"""Stock schemas"""

from pydantic import BaseModel


class TradingViewSymbolResponse(BaseModel):
    symbol: str
    tradingViewSymbol: str
    confidence: str
    reasoning: str

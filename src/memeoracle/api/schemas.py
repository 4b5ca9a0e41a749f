"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictFloat, StrictInt

from memeoracle.commentary.snapshot import MarketSnapshot
from memeoracle.demo import TrendingCoin
from memeoracle.models import Market, PayoutLine, Stake
from memeoracle.scorecard.stats import AgentStats


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"
    tracked_coins: int = 0
    open_markets: int = 0
    total_markets: int = 0


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. not_found, market_closed")


# --- Memes ---
class TrendingResponse(BaseModel):
    trending: list[TrendingCoin]
    count: int


# --- Markets ---
# Required fields are optional here so the ledger reports them as invalid_argument.
class CreateMarketRequest(BaseModel):
    subject: str | None = None
    question: str | None = None
    options: list[str] | None = None
    expires_in_ms: StrictInt | None = Field(None, description="Advisory lifetime; default 24h")


class MarketResponse(BaseModel):
    market: Market
    message: str = ""


class MarketListItem(BaseModel):
    market: Market
    total_pool: float
    participant_count: int


class MarketsListResponse(BaseModel):
    markets: list[MarketListItem]
    count: int


class MarketDetailResponse(BaseModel):
    market: Market
    current_odds: dict[str, str] = Field(..., description="total / pool(side), 'N/A' for an empty side")
    total_pool: float


# --- Stakes ---
class PlaceStakeRequest(BaseModel):
    agent_id: str | None = None
    position: str | None = Field(None, description="yes or no (case-insensitive)")
    # strict: JSON true or "100" is rejected, ints still pass
    amount: StrictFloat | None = None
    confidence: StrictFloat | None = None
    reasoning: str | None = None


class StakeResponse(BaseModel):
    stake: Stake
    current_odds: dict[str, str] = Field(..., description="pool(other) / pool(side) + 1, '1.00' until both sides have stakes")
    total_pool: float
    message: str = ""


# --- Resolution ---
class ResolveRequest(BaseModel):
    outcome: str | None = None
    price_at_resolution: StrictFloat | None = None


class ResolutionResponse(BaseModel):
    market: Market
    winners: list[PayoutLine]
    message: str = ""


class CoinAnalysisResponse(BaseModel):
    coin: TrendingCoin
    analysis: str | None = Field(None, description="Moon-or-rug call; null when unavailable")
    rug_check: str | None = Field(None, description="SAFE/CAUTION/DANGER rating; null when unavailable")


class AnalysisResponse(BaseModel):
    snapshot: MarketSnapshot
    analysis: str | None = Field(None, description="AI commentary; null when unavailable")


# --- Agents ---
class LeaderboardResponse(BaseModel):
    agents: list[AgentStats]
    count: int

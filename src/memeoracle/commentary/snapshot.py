"""Read-only market snapshot handed to the commentary collaborator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from memeoracle.ledger.odds import payout_ratio_odds
from memeoracle.models import Market, Odds, Pools, Stake


class MarketSnapshot(BaseModel):
    market_id: str
    subject: str
    question: str
    status: str
    pools: Pools
    total_pool: float
    odds: Odds
    participant_count: int
    recent_stakes: list[Stake] = Field(default_factory=list)


def snapshot_market(market: Market, recent: int = 5) -> MarketSnapshot:
    """Capture what commentary needs from an already published Market."""
    return MarketSnapshot(
        market_id=market.id,
        subject=market.subject,
        question=market.question,
        status=market.status.value,
        pools=market.pools,
        total_pool=market.total_pool,
        odds=payout_ratio_odds(market.pools),
        participant_count=market.participant_count,
        recent_stakes=list(market.stakes[-recent:]) if recent > 0 else [],
    )

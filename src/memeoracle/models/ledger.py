"""Results returned by ledger operations - receipts, views, payouts, agent history."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from memeoracle.models.market import Market, Odds, Stake


class StakeReceipt(BaseModel):
    """Returned by place_stake. current_odds use the prospective (+1) convention."""

    stake: Stake
    current_odds: Odds
    total_pool: float


class MarketView(BaseModel):
    """Market plus retrospective payout-ratio odds."""

    market: Market
    odds: Odds
    total_pool: float


class MarketSummary(BaseModel):
    market: Market
    total_pool: float
    participant_count: int


class PayoutLine(BaseModel):
    """One winning stake and what it is owed."""

    agent_id: str
    stake_id: str
    staked: float
    payout: float


class Resolution(BaseModel):
    market: Market
    payouts: list[PayoutLine] = Field(default_factory=list)

    @property
    def total_paid(self) -> float:
        return sum(p.payout for p in self.payouts)


class AgentStake(BaseModel):
    """Entry in the agent history index: a stake tagged with its market."""

    model_config = ConfigDict(frozen=True)

    market_id: str
    stake: Stake

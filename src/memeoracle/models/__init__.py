"""Canonical schema (Pydantic) - Market, Stake, ledger results."""

from memeoracle.models.ledger import (
    AgentStake,
    MarketSummary,
    MarketView,
    PayoutLine,
    Resolution,
    StakeReceipt,
)
from memeoracle.models.market import Market, MarketResult, MarketStatus, Odds, Pools, Side, Stake

__all__ = [
    "Market",
    "MarketResult",
    "MarketStatus",
    "Odds",
    "Pools",
    "Side",
    "Stake",
    "AgentStake",
    "MarketSummary",
    "MarketView",
    "PayoutLine",
    "Resolution",
    "StakeReceipt",
]

"""Market, Stake, Pools, Odds - canonical ledger entities."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Side(str, Enum):
    """Binary outcome side."""

    YES = "yes"
    NO = "no"

    @property
    def other(self) -> Side:
        return Side.NO if self is Side.YES else Side.YES


class MarketStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class Stake(BaseModel):
    """One agent's wager on one side of a market. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    id: str
    agent_id: str
    position: Side
    amount: float = Field(..., gt=0)
    confidence: float = Field(50, ge=0, le=100, description="Declared confidence %, informational")
    reasoning: str = ""
    timestamp: datetime


class Pools(BaseModel):
    """Cumulative staked amount per side."""

    model_config = ConfigDict(frozen=True)

    yes: float = 0.0
    no: float = 0.0

    def get(self, side: Side) -> float:
        return self.yes if side is Side.YES else self.no

    def add(self, side: Side, amount: float) -> Pools:
        """Return new Pools with amount added to side."""
        if side is Side.YES:
            return Pools(yes=self.yes + amount, no=self.no)
        return Pools(yes=self.yes, no=self.no + amount)

    @property
    def total(self) -> float:
        return self.yes + self.no


class MarketResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Side
    price_at_resolution: float | None = None
    resolved_at: datetime


class Market(BaseModel):
    """Yes/no question with two stake pools. Published snapshots are never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str
    subject: str
    question: str
    options: tuple[str, ...] = ()
    pools: Pools = Field(default_factory=Pools)
    stakes: tuple[Stake, ...] = ()
    status: MarketStatus = MarketStatus.OPEN
    created_at: datetime
    expires_at: datetime  # advisory only
    result: MarketResult | None = None

    @property
    def total_pool(self) -> float:
        return self.pools.total

    @property
    def participant_count(self) -> int:
        return len(self.stakes)

    @property
    def is_open(self) -> bool:
        return self.status is MarketStatus.OPEN


class Odds(BaseModel):
    """Decimal odds per side; None where undefined."""

    yes: float | None = None
    no: float | None = None

    def display(self) -> dict[str, str]:
        """Two-decimal strings, 'N/A' where undefined."""
        return {
            "yes": f"{self.yes:.2f}" if self.yes is not None else "N/A",
            "no": f"{self.no:.2f}" if self.no is not None else "N/A",
        }

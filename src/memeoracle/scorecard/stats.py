"""Agent accuracy and profit, replayed from the agent history index.

estimated_profit is a flat-rate approximation for ranking (winning stakes
earn amount * profit_factor, losing stakes lose amount). Exact settlement
amounts come from the ledger's payout schedule, not from here.
"""

from __future__ import annotations

from pydantic import BaseModel

from memeoracle.ledger.engine import MarketLedger
from memeoracle.models import MarketStatus

NOT_APPLICABLE = "N/A"


class AgentStats(BaseModel):
    agent_id: str
    total_predictions: int = 0
    resolved_predictions: int = 0
    correct_predictions: int = 0
    accuracy: str = NOT_APPLICABLE  # e.g. "66.7%"
    accuracy_pct: float | None = None
    estimated_profit: float = 0.0


class AgentScorecard:
    """Read-only view over a MarketLedger."""

    def __init__(self, ledger: MarketLedger, profit_factor: float = 0.9) -> None:
        self.ledger = ledger
        self.profit_factor = profit_factor

    def get_stats(self, agent_id: str) -> AgentStats:
        """Stats for agent_id; an unknown agent gets zero counts, never an error."""
        history = self.ledger.agent_history(agent_id)
        resolved = 0
        correct = 0
        profit = 0.0
        for entry in history:
            market = self.ledger.lookup(entry.market_id)
            if market is None or market.status is not MarketStatus.RESOLVED or market.result is None:
                continue
            resolved += 1
            if entry.stake.position is market.result.outcome:
                correct += 1
                profit += entry.stake.amount * self.profit_factor
            else:
                profit -= entry.stake.amount

        accuracy_pct = round(correct / resolved * 100, 1) if resolved else None
        return AgentStats(
            agent_id=agent_id,
            total_predictions=len(history),
            resolved_predictions=resolved,
            correct_predictions=correct,
            accuracy=f"{correct / resolved * 100:.1f}%" if resolved else NOT_APPLICABLE,
            accuracy_pct=accuracy_pct,
            estimated_profit=round(profit, 2),
        )

    def leaderboard(self, limit: int = 10) -> list[AgentStats]:
        """Agents ranked by estimated profit, then accuracy."""
        stats = [self.get_stats(agent_id) for agent_id in self.ledger.agent_ids()]
        stats.sort(key=lambda s: (s.estimated_profit, s.accuracy_pct or 0.0), reverse=True)
        return stats[:limit]

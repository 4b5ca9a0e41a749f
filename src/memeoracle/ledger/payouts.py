"""Pari-mutuel payout schedule for a resolved outcome."""

from __future__ import annotations

from memeoracle.models.ledger import PayoutLine
from memeoracle.models.market import Market, Side


def payout_schedule(market: Market, outcome: Side, decimals: int = 2) -> list[PayoutLine]:
    """Winning stakes get stake / win_pool * total, rounded. Losing stakes are omitted.

    With no winning stake the losing pool is not distributed and the schedule is empty.
    """
    win_pool = market.pools.get(outcome)
    total = win_pool + market.pools.get(outcome.other)
    lines = []
    for stake in market.stakes:
        if stake.position is not outcome:
            continue
        payout = round(stake.amount / win_pool * total, decimals) if win_pool > 0 else 0.0
        lines.append(
            PayoutLine(agent_id=stake.agent_id, stake_id=stake.id, staked=stake.amount, payout=payout)
        )
    return lines

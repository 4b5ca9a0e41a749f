"""Odds from pool state.

Two conventions, for two different callers:

- payout_ratio: retrospective, total / pool(side). What one unit staked on
  side returns if the market resolved now. Used for market inspection.
- prospective: pool(other) / pool(side) + 1. Quoted to an agent right after
  it places a stake. Neutral 1.0 unless both pools are non-zero.
"""

from __future__ import annotations

from memeoracle.models.market import Odds, Pools, Side


def payout_ratio(pools: Pools, side: Side) -> float | None:
    """total / pool(side); None when nothing is staked on side."""
    staked = pools.get(side)
    if staked <= 0:
        return None
    return pools.total / staked


def prospective(pools: Pools, side: Side) -> float:
    staked = pools.get(side)
    other = pools.get(side.other)
    if staked <= 0 or other <= 0:
        return 1.0
    return other / staked + 1


def payout_ratio_odds(pools: Pools) -> Odds:
    return Odds(yes=payout_ratio(pools, Side.YES), no=payout_ratio(pools, Side.NO))


def prospective_odds(pools: Pools) -> Odds:
    return Odds(yes=prospective(pools, Side.YES), no=prospective(pools, Side.NO))

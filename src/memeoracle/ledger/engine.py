"""Market ledger - owns markets, stakes and the agent history index.

State is published copy-on-write: every mutation builds a new frozen Market
under that market's lock and swaps it in with a single dict assignment.
Readers take the published reference without locking and always see a
whole prefix of stakes with matching pools.
"""

from __future__ import annotations

import math
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any, Callable

import structlog

from memeoracle.ledger.errors import AlreadyResolved, InvalidArgument, MarketClosed, MarketNotFound
from memeoracle.ledger.odds import payout_ratio_odds, prospective_odds
from memeoracle.ledger.payouts import payout_schedule
from memeoracle.models import (
    AgentStake,
    Market,
    MarketResult,
    MarketStatus,
    MarketSummary,
    MarketView,
    Resolution,
    Side,
    Stake,
    StakeReceipt,
)

log = structlog.get_logger(__name__)

DEFAULT_OPTIONS = ["YES - Moon 🚀", "NO - Rug 💀"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LedgerConfig:
    """Defaults applied at the call boundary when a caller omits a field."""

    default_expires_in_ms: int = 86_400_000
    default_options: list[str] = field(default_factory=lambda: list(DEFAULT_OPTIONS))
    default_confidence: float = 50.0
    payout_decimals: int = 2


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} required")
    return value


def parse_side(value: Any, name: str = "position") -> Side:
    """Normalize 'YES'/'no'/Side to Side. Raises InvalidArgument otherwise."""
    if isinstance(value, Side):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} required (yes/no)")
    try:
        return Side(value.strip().lower())
    except ValueError:
        raise InvalidArgument(f"{name} must be yes or no, got {value!r}") from None


def _parse_options(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or not all(isinstance(o, str) and o.strip() for o in value):
        raise InvalidArgument(f"options must be a list of non-empty strings, got {value!r}")
    return tuple(value) or None


def _parse_amount(value: Any) -> float:
    if value is None:
        raise InvalidArgument("amount required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"amount must be a number, got {value!r}")
    amount = float(value)
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidArgument(f"amount must be positive, got {value!r}")
    return amount


class MarketLedger:
    """In-memory prediction market ledger. Single owner of all market and history state."""

    def __init__(self, config: LedgerConfig | None = None, clock: Callable[[], datetime] | None = None) -> None:
        self.config = config or LedgerConfig()
        self._clock = clock or _utcnow
        self._markets: dict[str, Market] = {}
        self._locks: dict[str, Lock] = {}
        self._registry_lock = Lock()
        # agent_id -> stakes across all markets, arrival order
        self._history: dict[str, tuple[AgentStake, ...]] = {}
        self._history_lock = Lock()

    # --- Creation ---

    def create_market(
        self,
        subject: str,
        question: str,
        options: list[str] | None = None,
        expires_in_ms: int | None = None,
        *,
        market_id: str | None = None,
    ) -> Market:
        """Open a new market with empty pools. market_id is generated unless given."""
        _require_text("subject", subject)
        _require_text("question", question)
        parsed_options = _parse_options(options)
        if expires_in_ms is None:
            expires_in_ms = self.config.default_expires_in_ms
        if isinstance(expires_in_ms, bool) or not isinstance(expires_in_ms, int) or expires_in_ms <= 0:
            raise InvalidArgument(f"expires_in_ms must be a positive integer, got {expires_in_ms!r}")
        now = self._clock()
        with self._registry_lock:
            if market_id is None:
                market_id = secrets.token_hex(8)
                while market_id in self._markets:
                    market_id = secrets.token_hex(8)
            elif market_id in self._markets:
                raise InvalidArgument(f"market id already exists: {market_id}")
            market = Market(
                id=market_id,
                subject=subject,
                question=question,
                options=parsed_options or tuple(self.config.default_options),
                created_at=now,
                expires_at=now + timedelta(milliseconds=expires_in_ms),
            )
            self._locks[market_id] = Lock()
            self._markets[market_id] = market
        log.info("market_created", market_id=market_id, subject=subject)
        return market

    # --- Reads ---

    def lookup(self, market_id: str) -> Market | None:
        """Published snapshot or None."""
        return self._markets.get(market_id)

    def _require(self, market_id: str) -> Market:
        market = self._markets.get(market_id)
        if market is None:
            raise MarketNotFound(market_id)
        return market

    def get_market(self, market_id: str) -> MarketView:
        """Market with retrospective payout-ratio odds."""
        market = self._require(market_id)
        return MarketView(market=market, odds=payout_ratio_odds(market.pools), total_pool=market.total_pool)

    def list_markets(self, status: MarketStatus | None = MarketStatus.OPEN) -> list[MarketSummary]:
        """Markets in creation order, filtered by status (None = all)."""
        with self._registry_lock:
            markets = list(self._markets.values())
        return [
            MarketSummary(market=m, total_pool=m.total_pool, participant_count=m.participant_count)
            for m in markets
            if status is None or m.status is status
        ]

    def agent_history(self, agent_id: str) -> tuple[AgentStake, ...]:
        return self._history.get(agent_id, ())

    def agent_ids(self) -> list[str]:
        with self._history_lock:
            return list(self._history)

    def __len__(self) -> int:
        return len(self._markets)

    # --- Mutations ---

    def place_stake(
        self,
        market_id: str,
        agent_id: str,
        position: str | Side,
        amount: float,
        confidence: float | None = None,
        reasoning: str | None = None,
    ) -> StakeReceipt:
        """Append a stake and grow its pool. All-or-nothing: a rejected stake changes nothing."""
        self._require(market_id)
        with self._locks[market_id]:
            market = self._markets[market_id]
            if not market.is_open:
                raise MarketClosed(market_id)
            _require_text("agent_id", agent_id)
            side = parse_side(position)
            value = _parse_amount(amount)
            if confidence is None:
                confidence = self.config.default_confidence
            if isinstance(confidence, bool) or not isinstance(confidence, (int, float)) or not 0 <= confidence <= 100:
                raise InvalidArgument(f"confidence must be within 0..100, got {confidence!r}")
            if reasoning is not None and not isinstance(reasoning, str):
                raise InvalidArgument(f"reasoning must be text, got {reasoning!r}")
            pools = market.pools.add(side, value)
            if not (math.isfinite(pools.get(side)) and math.isfinite(pools.total)):
                raise InvalidArgument(f"amount {value!r} would overflow the {side.value} pool")

            taken = {s.id for s in market.stakes}
            stake_id = secrets.token_hex(4)
            while stake_id in taken:
                stake_id = secrets.token_hex(4)
            stake = Stake(
                id=stake_id,
                agent_id=agent_id,
                position=side,
                amount=value,
                confidence=float(confidence),
                reasoning=reasoning or "",
                timestamp=self._clock(),
            )
            updated = market.model_copy(
                update={"stakes": (*market.stakes, stake), "pools": pools}
            )
            self._markets[market_id] = updated
            with self._history_lock:
                self._history[agent_id] = (*self._history.get(agent_id, ()), AgentStake(market_id=market_id, stake=stake))

        log.info(
            "stake_placed",
            market_id=market_id,
            agent_id=agent_id,
            position=side.value,
            amount=value,
            total_pool=updated.total_pool,
        )
        return StakeReceipt(stake=stake, current_odds=prospective_odds(updated.pools), total_pool=updated.total_pool)

    def resolve_market(
        self,
        market_id: str,
        outcome: str | Side,
        price_at_resolution: float | None = None,
    ) -> Resolution:
        """Fix the outcome exactly once and compute the payout schedule."""
        self._require(market_id)
        side = parse_side(outcome, name="outcome")
        if price_at_resolution is not None and (
            isinstance(price_at_resolution, bool)
            or not isinstance(price_at_resolution, (int, float))
            or not math.isfinite(price_at_resolution)
        ):
            raise InvalidArgument(f"price_at_resolution must be a finite number, got {price_at_resolution!r}")
        with self._locks[market_id]:
            market = self._markets[market_id]
            if market.status is MarketStatus.RESOLVED:
                raise AlreadyResolved(market_id)
            result = MarketResult(outcome=side, price_at_resolution=price_at_resolution, resolved_at=self._clock())
            resolved = market.model_copy(update={"status": MarketStatus.RESOLVED, "result": result})
            self._markets[market_id] = resolved

        payouts = payout_schedule(resolved, side, decimals=self.config.payout_decimals)
        log.info(
            "market_resolved",
            market_id=market_id,
            outcome=side.value,
            winners=len(payouts),
            total_pool=resolved.total_pool,
        )
        return Resolution(market=resolved, payouts=payouts)

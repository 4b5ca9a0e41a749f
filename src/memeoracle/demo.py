"""Sample data: trending meme coin catalogue and a seeded demo market."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import structlog
from pydantic import BaseModel

from memeoracle.ledger.engine import MarketLedger
from memeoracle.models import Market

log = structlog.get_logger(__name__)

DEMO_MARKET_ID = "demo-wojak-moon"


class TrendingCoin(BaseModel):
    symbol: str
    name: str
    mint: str
    launch_time: datetime
    current_mcap: float
    holders: int
    volume_24h: float
    price_change_1h: float
    sentiment: str
    risk_score: float


# (symbol, name, mint, age_ms, mcap, holders, volume_24h, change_1h, sentiment, risk)
_TRENDING = [
    ("WOJAK", "Wojak Coin", "WojakXXX111111111111111111111111111111111", 3_600_000, 45_000, 234, 12_000, 125.5, "bullish", 8.5),
    ("GIGA", "Giga Chad", "GigaXXX2222222222222222222222222222222222", 7_200_000, 120_000, 567, 45_000, 45.2, "very_bullish", 6.2),
    ("RUGGED", "Definitely Not Rug", "RugXXX33333333333333333333333333333333333", 1_800_000, 8_000, 45, 3_000, 500.0, "extreme_fomo", 9.8),
    ("CATWIF", "Cat Wif Laser Eyes", "CatXXX444444444444444444444444444444444444", 14_400_000, 350_000, 1234, 89_000, 12.3, "stable_bullish", 4.5),
]


def trending_coins(now: datetime | None = None) -> list[TrendingCoin]:
    """Simulated pump.fun trending list; launch times are relative to now."""
    now = now or datetime.now(timezone.utc)
    return [
        TrendingCoin(
            symbol=symbol,
            name=name,
            mint=mint,
            launch_time=now - timedelta(milliseconds=age_ms),
            current_mcap=mcap,
            holders=holders,
            volume_24h=volume,
            price_change_1h=change,
            sentiment=sentiment,
            risk_score=risk,
        )
        for symbol, name, mint, age_ms, mcap, holders, volume, change, sentiment, risk in _TRENDING
    ]


def seed_demo(ledger: MarketLedger) -> Market:
    """Install the WOJAK demo market through the normal stake path. Idempotent."""
    existing = ledger.lookup(DEMO_MARKET_ID)
    if existing is not None:
        return existing
    ledger.create_market(
        "WOJAK",
        "Will WOJAK reach $1M mcap in 24h?",
        options=["YES - Moon 🚀", "NO - Dump 💀"],
        market_id=DEMO_MARKET_ID,
    )
    ledger.place_stake(DEMO_MARKET_ID, "meme-hunter", "yes", 200, 75, "Dev is based, community strong")
    ledger.place_stake(DEMO_MARKET_ID, "rug-detector", "no", 150, 60, "Wallet distribution sus")
    ledger.place_stake(DEMO_MARKET_ID, "degen-ai", "yes", 300, 90, "YOLO")
    log.info("demo_seeded", market_id=DEMO_MARKET_ID)
    return ledger.lookup(DEMO_MARKET_ID)

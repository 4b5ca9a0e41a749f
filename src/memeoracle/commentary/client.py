"""Best-effort AI commentary over a messages-style LLM endpoint.

Never raises into ledger code: any transport or response failure is logged
and reported as None. Call it only with data already captured (snapshots),
never while holding a ledger lock.
"""

from __future__ import annotations

import os
from typing import Any

import httpx
import structlog

from memeoracle.commentary.snapshot import MarketSnapshot
from memeoracle.demo import TrendingCoin

log = structlog.get_logger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


def market_prompt(snap: MarketSnapshot) -> str:
    recent = "\n".join(
        f"- {s.agent_id}: {s.position.value.upper()} {s.amount:g} ({s.confidence:g}%) {s.reasoning}".rstrip()
        for s in snap.recent_stakes
    )
    return (
        "You are analyzing a memecoin prediction market on Solana.\n"
        f"Question: {snap.question}\n"
        f"Current YES pool: {snap.pools.yes:g} | NO pool: {snap.pools.no:g}\n"
        f"Number of predictions: {snap.participant_count}\n"
        f"Recent predictions:\n{recent or '- none'}\n\n"
        "Provide AI analysis: which side has more merit? What on-chain signals support each position? "
        "Give a brief recommendation with reasoning. Be specific about Solana memecoin patterns."
    )


def coin_prompt(coin: TrendingCoin) -> str:
    return (
        "You are the Meme Oracle, an AI expert at predicting which Solana memecoins will moon or rug. "
        "Analyze this token:\n"
        f"Symbol: {coin.symbol}, Name: {coin.name}\n"
        f"Market Cap: ${coin.current_mcap:g}, Holders: {coin.holders}\n"
        f"24h Volume: ${coin.volume_24h:g}, 1h Change: {coin.price_change_1h:g}%\n"
        f"Risk Score: {coin.risk_score:g}/10\n\n"
        "Give your prediction: MOON or RUG? Include confidence %, key risk factors, and a memecoin-style verdict. "
        "Reference pump.fun patterns and Solana DEX liquidity. Keep it punchy (3-4 sentences)."
    )


def rug_check_prompt(coin: TrendingCoin) -> str:
    return (
        "Perform an AI rug-check analysis for a Solana memecoin:\n"
        f"Symbol: {coin.symbol}, Holders: {coin.holders}, MCap: ${coin.current_mcap:g}\n"
        f"Volume: ${coin.volume_24h:g}, Risk: {coin.risk_score:g}/10\n\n"
        "Check for: concentrated holdings, low liquidity, suspicious dev wallet patterns, honeypot indicators. "
        "Give a SAFE/CAUTION/DANGER rating with explanation. Be brutally honest."
    )


class CommentaryClient:
    """Posts prompts to an Anthropic-compatible /v1/messages endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str = ANTHROPIC_MESSAGES_URL,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 500,
        timeout: float = 30.0,
        enabled: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.enabled = enabled
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any) -> CommentaryClient:
        return cls(
            api_key=os.environ.get(settings.commentary_api_key_env),
            api_url=settings.commentary_api_url,
            model=settings.commentary_model,
            max_tokens=settings.commentary_max_tokens,
            timeout=settings.commentary_timeout_sec,
            enabled=settings.commentary_enabled,
        )

    @property
    def available(self) -> bool:
        return self.enabled and bool(self.api_key)

    def complete(self, prompt: str, max_tokens: int | None = None) -> str | None:
        """Return generated text, or None if disabled or the call failed."""
        if not self.available:
            log.debug("commentary_disabled")
            return None
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(
                    self.api_url,
                    headers={
                        "x-api-key": self.api_key or "",
                        "anthropic-version": ANTHROPIC_VERSION,
                        "Content-Type": "application/json",
                    },
                    json={
                        "model": self.model,
                        "max_tokens": max_tokens or self.max_tokens,
                        "messages": [{"role": "user", "content": prompt}],
                    },
                )
                resp.raise_for_status()
                data = resp.json()
            return data["content"][0]["text"]
        except httpx.HTTPError as e:
            log.warning("commentary_failed", error=str(e))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            log.warning("commentary_bad_response", error=str(e))
        return None

    def analyze_market(self, snap: MarketSnapshot) -> str | None:
        return self.complete(market_prompt(snap), max_tokens=400)

    def analyze_coin(self, coin: TrendingCoin) -> str | None:
        return self.complete(coin_prompt(coin))

    def rug_check(self, coin: TrendingCoin) -> str | None:
        return self.complete(rug_check_prompt(coin), max_tokens=400)

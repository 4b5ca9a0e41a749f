"""Ledger error kinds. All are local, synchronous and never retried."""

from __future__ import annotations


class LedgerError(Exception):
    """Base for ledger failures. code is machine-readable (API error body)."""

    code = "ledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(LedgerError):
    code = "invalid_argument"


class MarketNotFound(LedgerError):
    code = "not_found"

    def __init__(self, market_id: str) -> None:
        super().__init__(f"Market not found: {market_id}")
        self.market_id = market_id


class MarketClosed(LedgerError):
    code = "market_closed"

    def __init__(self, market_id: str) -> None:
        super().__init__(f"Market closed: {market_id}")
        self.market_id = market_id


class AlreadyResolved(LedgerError):
    code = "already_resolved"

    def __init__(self, market_id: str) -> None:
        super().__init__(f"Market already resolved: {market_id}")
        self.market_id = market_id

"""Market ledger - creation, stakes, odds, resolution, payouts."""

from memeoracle.ledger.engine import LedgerConfig, MarketLedger
from memeoracle.ledger.errors import AlreadyResolved, InvalidArgument, LedgerError, MarketClosed, MarketNotFound

__all__ = [
    "LedgerConfig",
    "MarketLedger",
    "LedgerError",
    "InvalidArgument",
    "MarketNotFound",
    "MarketClosed",
    "AlreadyResolved",
]

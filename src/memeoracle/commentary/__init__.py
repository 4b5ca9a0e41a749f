"""Commentary collaborator - read-only snapshots and a best-effort LLM client."""

from memeoracle.commentary.client import CommentaryClient
from memeoracle.commentary.snapshot import MarketSnapshot, snapshot_market

__all__ = ["CommentaryClient", "MarketSnapshot", "snapshot_market"]

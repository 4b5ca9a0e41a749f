"""Meme Oracle - pari-mutuel prediction market ledger for AI agents."""

__version__ = "0.1.0"

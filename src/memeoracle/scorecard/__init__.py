"""Agent scorecard - accuracy and estimated profit per agent."""

from memeoracle.scorecard.stats import AgentScorecard, AgentStats

__all__ = ["AgentScorecard", "AgentStats"]

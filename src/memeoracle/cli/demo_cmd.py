"""Demo command: run a two-agent market end to end in-process."""

from __future__ import annotations

import typer

from memeoracle.ledger import LedgerError, MarketLedger
from memeoracle.scorecard import AgentScorecard

app = typer.Typer(help="Run a scripted market: create, stake, resolve, settle")


@app.callback(invoke_without_command=True)
def demo(
    ctx: typer.Context,
    subject: str = typer.Option("WOJAK", "--subject", "-s", help="Coin symbol the market is about"),
    yes_amount: float = typer.Option(200.0, "--yes-amount", help="Stake by agent A on YES"),
    no_amount: float = typer.Option(100.0, "--no-amount", help="Stake by agent B on NO"),
    outcome: str = typer.Option("yes", "--outcome", "-o", help="Resolution outcome (yes/no)"),
) -> None:
    """Print prospective odds after each stake, then the payout schedule and agent stats."""
    if ctx.invoked_subcommand is not None:
        return
    settings = ctx.obj["settings"]
    ledger = MarketLedger(settings.ledger_config())
    scorecard = AgentScorecard(ledger, profit_factor=settings.profit_factor)
    try:
        market = ledger.create_market(subject, f"Will {subject} 5x in the next 24 hours?")
        typer.echo(f"Market {market.id}: {market.question}")
        for agent_id, position, amount in (("A", "yes", yes_amount), ("B", "no", no_amount)):
            receipt = ledger.place_stake(market.id, agent_id, position, amount)
            odds = receipt.current_odds.display()
            typer.echo(
                f"  {agent_id} {position.upper()} {amount:.2f}  pool={receipt.total_pool:.2f}  "
                f"odds yes={odds['yes']} no={odds['no']}"
            )
        view = ledger.get_market(market.id)
        odds = view.odds.display()
        typer.echo(f"Payout ratio: yes={odds['yes']} no={odds['no']}")
        resolution = ledger.resolve_market(market.id, outcome)
    except LedgerError as e:
        typer.echo(f"Error ({e.code}): {e.message}")
        raise typer.Exit(1)
    typer.echo(f"Resolved {outcome.upper()}; winners: {len(resolution.payouts)}")
    for line in resolution.payouts:
        typer.echo(f"  {line.agent_id}  staked {line.staked:.2f}  payout {line.payout:.2f}")
    for agent_id in ("A", "B"):
        s = scorecard.get_stats(agent_id)
        typer.echo(f"  {agent_id}: accuracy {s.accuracy}  est. profit {s.estimated_profit:.2f}")

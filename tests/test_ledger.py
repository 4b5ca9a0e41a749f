"""Market ledger unit tests: creation, stakes, resolution, payouts."""

from datetime import datetime, timedelta, timezone

import pytest

from memeoracle.ledger import (
    AlreadyResolved,
    InvalidArgument,
    LedgerConfig,
    MarketClosed,
    MarketLedger,
    MarketNotFound,
)
from memeoracle.models import MarketStatus, Side

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def ledger():
    return MarketLedger(clock=lambda: T0)


def _pool_sums(market):
    yes = sum(s.amount for s in market.stakes if s.position is Side.YES)
    no = sum(s.amount for s in market.stakes if s.position is Side.NO)
    return yes, no


def test_create_market_defaults(ledger):
    m = ledger.create_market("WOJAK", "Will WOJAK 5x?")
    assert len(m.id) == 16
    int(m.id, 16)
    assert m.status is MarketStatus.OPEN
    assert m.pools.yes == 0 and m.pools.no == 0
    assert m.stakes == ()
    assert m.result is None
    assert m.options == ("YES - Moon 🚀", "NO - Rug 💀")
    assert m.expires_at - m.created_at == timedelta(hours=24)


def test_create_market_custom_expiry_and_options(ledger):
    m = ledger.create_market("GIGA", "Will GIGA flip CATWIF?", options=["Yes", "No"], expires_in_ms=60_000)
    assert m.options == ("Yes", "No")
    assert m.expires_at == T0 + timedelta(minutes=1)


def test_create_market_uses_configured_defaults():
    led = MarketLedger(LedgerConfig(default_expires_in_ms=1000, default_options=["Up", "Down"]))
    m = led.create_market("X", "Q?")
    assert m.options == ("Up", "Down")
    assert m.expires_at - m.created_at == timedelta(seconds=1)


@pytest.mark.parametrize("subject,question", [("", "Q?"), ("WOJAK", ""), (None, "Q?"), ("WOJAK", "   ")])
def test_create_market_requires_subject_and_question(ledger, subject, question):
    with pytest.raises(InvalidArgument):
        ledger.create_market(subject, question)
    assert len(ledger) == 0


@pytest.mark.parametrize("options", [[1, 2], ["Yes", ""], "Yes/No", [None]])
def test_create_market_rejects_malformed_options(ledger, options):
    with pytest.raises(InvalidArgument):
        ledger.create_market("WOJAK", "Q?", options=options)
    assert len(ledger) == 0


def test_create_market_ids_are_unique(ledger):
    ids = {ledger.create_market("S", "Q?").id for _ in range(200)}
    assert len(ids) == 200


def test_place_stake_updates_pools_and_history(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    r = ledger.place_stake(m.id, "A", "YES", 200, confidence=75, reasoning="community strong")
    assert r.stake.position is Side.YES
    assert r.stake.agent_id == "A"
    assert r.stake.confidence == 75
    assert r.total_pool == 200
    ledger.place_stake(m.id, "B", "no", 100)
    ledger.place_stake(m.id, "A", " yes ", 50.5)

    market = ledger.get_market(m.id).market
    assert [s.agent_id for s in market.stakes] == ["A", "B", "A"]
    assert (market.pools.yes, market.pools.no) == _pool_sums(market)
    assert market.pools.yes == 250.5
    assert len({s.id for s in market.stakes}) == 3

    history = ledger.agent_history("A")
    assert [h.market_id for h in history] == [m.id, m.id]
    assert history[0].stake is market.stakes[0]
    assert ledger.agent_history("nobody") == ()


def test_place_stake_default_confidence_and_reasoning(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    r = ledger.place_stake(m.id, "A", "yes", 10)
    assert r.stake.confidence == 50
    assert r.stake.reasoning == ""
    assert r.stake.timestamp == T0


def test_place_stake_unknown_market(ledger):
    with pytest.raises(MarketNotFound):
        ledger.place_stake("nope", "A", "yes", 10)


@pytest.mark.parametrize(
    "agent_id,position,amount,confidence",
    [
        ("", "yes", 10, None),
        (None, "yes", 10, None),
        ("A", "maybe", 10, None),
        ("A", None, 10, None),
        ("A", "yes", 0, None),
        ("A", "yes", -5, None),
        ("A", "yes", None, None),
        ("A", "yes", float("nan"), None),
        ("A", "yes", float("inf"), None),
        ("A", "yes", "10", None),
        ("A", "yes", True, None),
        ("A", "yes", 10, 101),
        ("A", "yes", 10, -1),
    ],
)
def test_place_stake_invalid_leaves_state_unchanged(ledger, agent_id, position, amount, confidence):
    m = ledger.create_market("WOJAK", "Q?")
    ledger.place_stake(m.id, "A", "yes", 10)
    before = ledger.lookup(m.id)
    with pytest.raises(InvalidArgument):
        ledger.place_stake(m.id, agent_id, position, amount, confidence=confidence)
    assert ledger.lookup(m.id) is before
    assert len(ledger.agent_history("A")) == 1


@pytest.mark.parametrize("reasoning", [123, ["because"], {"why": "moon"}])
def test_place_stake_rejects_non_text_reasoning(ledger, reasoning):
    m = ledger.create_market("WOJAK", "Q?")
    with pytest.raises(InvalidArgument):
        ledger.place_stake(m.id, "A", "yes", 10, reasoning=reasoning)
    assert ledger.lookup(m.id).stakes == ()
    assert ledger.agent_history("A") == ()


def test_place_stake_rejects_pool_overflow(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    ledger.place_stake(m.id, "A", "yes", 1e308)
    before = ledger.lookup(m.id)
    with pytest.raises(InvalidArgument):
        ledger.place_stake(m.id, "B", "yes", 1e308)
    # total across both sides must stay finite too
    with pytest.raises(InvalidArgument):
        ledger.place_stake(m.id, "C", "no", 1e308)
    assert ledger.lookup(m.id) is before
    res = ledger.resolve_market(m.id, "yes")
    assert res.payouts[0].payout == 1e308
    assert abs(res.total_paid - before.total_pool) <= 0.01


def test_place_stake_after_resolution_is_closed(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    ledger.place_stake(m.id, "A", "yes", 10)
    ledger.resolve_market(m.id, "yes")
    with pytest.raises(MarketClosed):
        ledger.place_stake(m.id, "B", "no", 99)
    market = ledger.lookup(m.id)
    assert market.pools.yes == 10 and market.pools.no == 0
    assert ledger.agent_history("B") == ()


def test_wojak_scenario_payouts(ledger):
    m = ledger.create_market("WOJAK", "Will WOJAK 5x?")
    ledger.place_stake(m.id, "A", "yes", 200)
    ledger.place_stake(m.id, "B", "no", 100)
    res = ledger.resolve_market(m.id, "yes", price_at_resolution=0.0042)

    assert res.market.status is MarketStatus.RESOLVED
    assert res.market.result.outcome is Side.YES
    assert res.market.result.price_at_resolution == 0.0042
    assert res.market.result.resolved_at == T0
    assert len(res.payouts) == 1
    line = res.payouts[0]
    assert line.agent_id == "A"
    assert line.staked == 200
    assert line.payout == 300.00


def test_payouts_sum_to_total_pool(ledger):
    m = ledger.create_market("CATWIF", "Q?")
    amounts = [("a", "yes", 33.33), ("b", "yes", 17), ("c", "no", 41.5), ("d", "yes", 9.99), ("e", "no", 12)]
    for agent, side, amount in amounts:
        ledger.place_stake(m.id, agent, side, amount)
    res = ledger.resolve_market(m.id, "no")
    total = sum(a for _, _, a in amounts)
    assert {p.agent_id for p in res.payouts} == {"c", "e"}
    assert abs(res.total_paid - total) <= 0.01 * len(res.payouts)


def test_resolve_without_winning_stakes(ledger):
    m = ledger.create_market("RUGGED", "Q?")
    ledger.place_stake(m.id, "A", "no", 50)
    res = ledger.resolve_market(m.id, "yes")
    assert res.payouts == []
    assert all(p.payout == 0 for p in res.payouts)


def test_resolve_empty_market(ledger):
    m = ledger.create_market("RUGGED", "Q?")
    res = ledger.resolve_market(m.id, "YES")
    assert res.payouts == []
    assert res.market.result.outcome is Side.YES


def test_resolve_twice_fails_and_keeps_first_result(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    first = ledger.resolve_market(m.id, "yes")
    with pytest.raises(AlreadyResolved):
        ledger.resolve_market(m.id, "no")
    assert ledger.lookup(m.id).result == first.market.result


def test_resolve_invalid_outcome_and_unknown_market(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    with pytest.raises(InvalidArgument):
        ledger.resolve_market(m.id, "draw")
    assert ledger.lookup(m.id).is_open
    with pytest.raises(MarketNotFound):
        ledger.resolve_market("missing", "yes")


def test_list_markets_filters_by_status(ledger):
    a = ledger.create_market("A", "Q?")
    b = ledger.create_market("B", "Q?")
    ledger.place_stake(a.id, "x", "yes", 5)
    ledger.place_stake(a.id, "y", "no", 7)
    ledger.resolve_market(b.id, "no")

    open_ = ledger.list_markets()
    assert [s.market.id for s in open_] == [a.id]
    assert open_[0].total_pool == 12
    assert open_[0].participant_count == 2
    assert [s.market.id for s in ledger.list_markets(MarketStatus.RESOLVED)] == [b.id]
    assert [s.market.id for s in ledger.list_markets(None)] == [a.id, b.id]


def test_get_market_reports_payout_ratio_odds(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    view = ledger.get_market(m.id)
    assert view.odds.yes is None and view.odds.no is None
    assert view.odds.display() == {"yes": "N/A", "no": "N/A"}
    ledger.place_stake(m.id, "A", "yes", 200)
    ledger.place_stake(m.id, "B", "no", 100)
    view = ledger.get_market(m.id)
    assert view.total_pool == 300
    assert view.odds.display() == {"yes": "1.50", "no": "3.00"}
    with pytest.raises(MarketNotFound):
        ledger.get_market("missing")


def test_stake_receipt_reports_prospective_odds(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    r = ledger.place_stake(m.id, "A", "yes", 200)
    assert r.current_odds.display() == {"yes": "1.00", "no": "1.00"}
    r = ledger.place_stake(m.id, "B", "no", 100)
    assert r.current_odds.display() == {"yes": "1.50", "no": "3.00"}
    r = ledger.place_stake(m.id, "C", "no", 300)
    assert r.current_odds.yes == pytest.approx(3.0)
    assert r.current_odds.no == pytest.approx(1.5)


def test_published_snapshots_are_immutable(ledger):
    m = ledger.create_market("WOJAK", "Q?")
    ledger.place_stake(m.id, "A", "yes", 10)
    snap = ledger.lookup(m.id)
    ledger.place_stake(m.id, "B", "no", 20)
    assert len(snap.stakes) == 1
    assert snap.pools.no == 0
    with pytest.raises(Exception):
        snap.status = MarketStatus.RESOLVED


def test_explicit_market_id_must_be_unique(ledger):
    ledger.create_market("WOJAK", "Q?", market_id="fixed")
    with pytest.raises(InvalidArgument):
        ledger.create_market("WOJAK", "Q?", market_id="fixed")


@pytest.mark.parametrize("price", ["0.01", True, float("nan")])
def test_resolve_rejects_malformed_price(ledger, price):
    m = ledger.create_market("WOJAK", "Q?")
    with pytest.raises(InvalidArgument):
        ledger.resolve_market(m.id, "yes", price_at_resolution=price)
    assert ledger.lookup(m.id).is_open


def test_snapshot_options_are_not_shared_mutable_state(ledger):
    m = ledger.create_market("WOJAK", "Q?", options=["Moon", "Rug"])
    first = ledger.lookup(m.id)
    ledger.place_stake(m.id, "A", "yes", 10)
    assert isinstance(first.options, tuple)
    with pytest.raises(AttributeError):
        first.options.append("HACK")
    assert ledger.lookup(m.id).options == ("Moon", "Rug")

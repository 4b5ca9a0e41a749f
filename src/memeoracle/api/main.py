"""FastAPI app exposing the ledger, scorecard and commentary."""

from __future__ import annotations

from enum import Enum

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from memeoracle.api.schemas import (
    AnalysisResponse,
    CoinAnalysisResponse,
    CreateMarketRequest,
    ErrorResponse,
    HealthResponse,
    LeaderboardResponse,
    MarketDetailResponse,
    MarketListItem,
    MarketResponse,
    MarketsListResponse,
    PlaceStakeRequest,
    ResolutionResponse,
    ResolveRequest,
    StakeResponse,
    TrendingResponse,
)
from memeoracle.commentary import CommentaryClient, snapshot_market
from memeoracle.config import Settings, get_settings
from memeoracle.demo import seed_demo, trending_coins
from memeoracle.ledger import (
    AlreadyResolved,
    InvalidArgument,
    LedgerError,
    MarketClosed,
    MarketLedger,
    MarketNotFound,
)
from memeoracle.models import MarketStatus
from memeoracle.scorecard import AgentScorecard, AgentStats

log = structlog.get_logger(__name__)

_STATUS_CODES: dict[type[LedgerError], int] = {
    InvalidArgument: 400,
    MarketNotFound: 404,
    MarketClosed: 409,
    AlreadyResolved: 409,
}

_NOT_FOUND = {404: {"description": "Market not found", "model": ErrorResponse}}


class StatusFilter(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    ALL = "all"


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def get_ledger(request: Request) -> MarketLedger:
    return request.app.state.ledger


def get_scorecard(request: Request) -> AgentScorecard:
    return request.app.state.scorecard


def get_commentary(request: Request) -> CommentaryClient:
    return request.app.state.commentary


def create_app(
    settings: Settings | None = None,
    ledger: MarketLedger | None = None,
    commentary: CommentaryClient | None = None,
) -> FastAPI:
    """Build the app around one ledger. Pass ledger/commentary to share or stub them."""
    settings = settings or get_settings()
    if ledger is None:
        ledger = MarketLedger(settings.ledger_config())
        if settings.seed_demo:
            seed_demo(ledger)

    app = FastAPI(title="Meme Oracle API", version="0.1.0")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.ledger = ledger
    app.state.scorecard = AgentScorecard(ledger, profit_factor=settings.profit_factor)
    app.state.commentary = commentary or CommentaryClient.from_settings(settings)

    @app.exception_handler(LedgerError)
    async def _ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
        return _error_json(exc.code, exc.message, _STATUS_CODES.get(type(exc), 400))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        return _error_json(InvalidArgument.code, f"{where}: {first.get('msg', 'invalid request')}", 400)

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse)
    def health(ledger: MarketLedger = Depends(get_ledger)) -> HealthResponse:
        return HealthResponse(
            status="ok",
            tracked_coins=len(trending_coins()),
            open_markets=len(ledger.list_markets(MarketStatus.OPEN)),
            total_markets=len(ledger),
        )

    @app.get("/memes/trending", response_model=TrendingResponse)
    def memes_trending() -> TrendingResponse:
        """Simulated pump.fun trending coins."""
        coins = trending_coins()
        return TrendingResponse(trending=coins, count=len(coins))

    @app.get(
        "/memes/{symbol}/analysis",
        response_model=CoinAnalysisResponse,
        responses={404: {"description": "Coin not tracked", "model": ErrorResponse}},
    )
    def meme_analysis(symbol: str, commentary: CommentaryClient = Depends(get_commentary)):
        """Moon-or-rug call and rug check for a trending coin. Fields are null when the service is unavailable."""
        coin = next((c for c in trending_coins() if c.symbol == symbol.upper()), None)
        if coin is None:
            return _error_json("not_found", f"Coin not tracked: {symbol}")
        return CoinAnalysisResponse(coin=coin, analysis=commentary.analyze_coin(coin), rug_check=commentary.rug_check(coin))

    @app.post("/markets", response_model=MarketResponse)
    def markets_create(body: CreateMarketRequest, ledger: MarketLedger = Depends(get_ledger)) -> MarketResponse:
        market = ledger.create_market(body.subject, body.question, body.options, body.expires_in_ms)
        return MarketResponse(market=market, message=f"Prediction market created for {market.subject}!")

    @app.get("/markets", response_model=MarketsListResponse)
    def markets_list(
        status: StatusFilter = Query(StatusFilter.OPEN, description="open, resolved or all"),
        ledger: MarketLedger = Depends(get_ledger),
    ) -> MarketsListResponse:
        wanted = None if status is StatusFilter.ALL else MarketStatus(status.value)
        items = [
            MarketListItem(market=s.market, total_pool=s.total_pool, participant_count=s.participant_count)
            for s in ledger.list_markets(wanted)
        ]
        return MarketsListResponse(markets=items, count=len(items))

    @app.get("/markets/{market_id}", response_model=MarketDetailResponse, responses=_NOT_FOUND)
    def market_detail(market_id: str, ledger: MarketLedger = Depends(get_ledger)) -> MarketDetailResponse:
        """Market with retrospective odds (total / side pool)."""
        view = ledger.get_market(market_id)
        return MarketDetailResponse(market=view.market, current_odds=view.odds.display(), total_pool=view.total_pool)

    @app.post("/markets/{market_id}/stakes", response_model=StakeResponse, responses=_NOT_FOUND)
    def market_stake(
        market_id: str,
        body: PlaceStakeRequest,
        ledger: MarketLedger = Depends(get_ledger),
    ) -> StakeResponse:
        """Place a stake. Odds returned are prospective (other / side + 1)."""
        receipt = ledger.place_stake(
            market_id,
            body.agent_id,
            body.position,
            body.amount,
            confidence=body.confidence,
            reasoning=body.reasoning,
        )
        stake = receipt.stake
        return StakeResponse(
            stake=stake,
            current_odds=receipt.current_odds.display(),
            total_pool=receipt.total_pool,
            message=f"Prediction recorded! {stake.position.value.upper()} with {stake.confidence:g}% confidence.",
        )

    @app.post("/markets/{market_id}/resolve", response_model=ResolutionResponse, responses=_NOT_FOUND)
    def market_resolve(
        market_id: str,
        body: ResolveRequest,
        ledger: MarketLedger = Depends(get_ledger),
    ) -> ResolutionResponse:
        resolution = ledger.resolve_market(market_id, body.outcome, body.price_at_resolution)
        outcome = resolution.market.result.outcome.value
        return ResolutionResponse(
            market=resolution.market,
            winners=resolution.payouts,
            message=f"Market resolved! {outcome.upper()} wins!",
        )

    @app.get("/markets/{market_id}/analysis", response_model=AnalysisResponse, responses=_NOT_FOUND)
    def market_analysis(
        market_id: str,
        ledger: MarketLedger = Depends(get_ledger),
        commentary: CommentaryClient = Depends(get_commentary),
    ) -> AnalysisResponse:
        """AI commentary on a market snapshot. analysis is null when the service is unavailable."""
        snap = snapshot_market(ledger.get_market(market_id).market)
        return AnalysisResponse(snapshot=snap, analysis=commentary.analyze_market(snap))

    @app.get("/agents/{agent_id}/stats", response_model=AgentStats)
    def agent_stats(agent_id: str, scorecard: AgentScorecard = Depends(get_scorecard)) -> AgentStats:
        return scorecard.get_stats(agent_id)

    @app.get("/leaderboard", response_model=LeaderboardResponse)
    def leaderboard(
        limit: int = Query(10, ge=1, le=100),
        scorecard: AgentScorecard = Depends(get_scorecard),
    ) -> LeaderboardResponse:
        agents = scorecard.leaderboard(limit=limit)
        return LeaderboardResponse(agents=agents, count=len(agents))


def run_api(
    host: str | None = None,
    port: int | None = None,
    profile: str | None = None,
    settings: Settings | None = None,
) -> None:
    settings = settings or get_settings(profile)
    app = create_app(settings)
    log.info("api_starting", host=host or settings.api_host, port=port or settings.api_port)
    import uvicorn
    uvicorn.run(app, host=host or settings.api_host, port=port or settings.api_port, reload=False)

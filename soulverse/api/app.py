"""
FastAPI Application - REST API for battle clients.

Endpoints:
    POST   /api/v1/battles              Start a battle against a monster
    GET    /api/v1/battles              List battles
    GET    /api/v1/battles/{id}         Get battle state
    POST   /api/v1/battles/{id}/actions Submit a player action
    POST   /api/v1/battles/{id}/end     Get the outcome (surrendering if still running)
    DELETE /api/v1/battles/{id}         Release a battle (surrendering if still running)
    GET    /api/v1/profile              Get the player profile
    GET    /api/v1/monsters             List monsters

Battle Flow:
    1. POST /battles starts the duel; if the monster wins the coin toss
       its first turn has already been played in the response
    2. POST /actions applies one player action. Ending the turn runs the
       monster's whole turn before the response is returned
    3. When the duel ends, permadeath and rewards are applied to the
       profile immediately; POST /end returns that outcome

All requests and responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

# Environment configuration
SOULVERSE_ENV = os.getenv("SOULVERSE_ENV", "development")
SOULVERSE_SEED = os.getenv("SOULVERSE_SEED", None)
SOULVERSE_LOG_LEVEL = os.getenv("SOULVERSE_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    import random

    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateBattleRequest,
        # Response models
        ActionResponse,
        BattleListResponse,
        BattleOutcomeResponse,
        BattleStateResponse,
        EndBattleResponse,
        ErrorResponse,
        HealthResponse,
        MonsterListResponse,
        ProfileResponse,
        # Enums
        ErrorCode,
    )
    from ..content import create_starter_profile

    logging.basicConfig(
        level=SOULVERSE_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Soulverse Duel API",
        description="""
Turn-based card duels against monsters, with permanent consequences.

## Battle Flow

1. `POST /api/v1/battles` with an `opponent_id` starts a duel
2. `POST /api/v1/battles/{id}/actions` plays cards, attacks and ends turns;
   the monster answers within the same response
3. When the duel ends, cards that died are **BROKEN** in the profile and a
   victory grants soul essence, root XP and fragments
4. `POST /api/v1/battles/{id}/end` returns the outcome, surrendering a
   running battle (two random equipped cards break)

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Battle does not exist |
| `UNKNOWN_OPPONENT` | Monster id is not known |
| `ILLEGAL_MOVE` | The engine rejected the move |
| `NOT_YOUR_TURN` | It is not the player's turn |
| `GAME_NOT_ACTIVE` | The battle has already ended |
| `BATTLE_NOT_FINISHED` | Outcome requested for a running battle |
| `VALIDATION_ERROR` | A deck failed validation |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        rng = random.Random(int(SOULVERSE_SEED)) if SOULVERSE_SEED else None
        service = APIService(profile=create_starter_profile(rng))
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.UNKNOWN_OPPONENT: 404,
        ErrorCode.NOT_YOUR_TURN: 409,
        ErrorCode.GAME_NOT_ACTIVE: 409,
        ErrorCode.BATTLE_NOT_FINISHED: 409,
        ErrorCode.VALIDATION_ERROR: 422,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or status_codes.get(error_code, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def from_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(response.error_code, response.error, details=response.details)

    # =========================================================================
    # Battle Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/battles",
        response_model=BattleStateResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Unknown opponent"},
            422: {"model": ErrorResponse, "description": "Deck failed validation"},
        },
        tags=["Battles"],
        summary="Start a battle against a monster",
    )
    async def create_battle(request: CreateBattleRequest) -> Union[BattleStateResponse, JSONResponse]:
        """
        Start a battle of the player profile against a monster.

        Only cards that are not BROKEN or EXILED enter the duel.
        """
        response = api_service.create_battle(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/battles",
        response_model=BattleListResponse,
        tags=["Battles"],
        summary="List battles",
    )
    async def list_battles() -> BattleListResponse:
        """List all battle ids held in memory."""
        battles = api_service.list_battles()
        return BattleListResponse(battles=battles, count=len(battles))

    @app.get(
        "/api/v1/battles/{battle_id}",
        response_model=BattleStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Get battle state",
    )
    async def get_battle(battle_id: str) -> Union[BattleStateResponse, JSONResponse]:
        """Get the current state of a battle. The opponent's hand is hidden."""
        response = api_service.get_battle(battle_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/battles/{battle_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal move"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Not your turn or battle over"},
        },
        tags=["Battles"],
        summary="Submit a player action",
    )
    async def submit_action(
        battle_id: str, request: ActionRequest
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Play a card, attack, or end the turn.

        The response includes the monster's actions if its turn ran.
        """
        response = api_service.submit_action(battle_id, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/battles/{battle_id}/end",
        response_model=BattleOutcomeResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Get the battle outcome",
    )
    async def end_battle(
        battle_id: str,
        surrender: Annotated[bool, Query(description="Surrender if the battle is still running")] = True,
    ) -> Union[BattleOutcomeResponse, JSONResponse]:
        """Return the battle's permanent outcome, surrendering first if allowed."""
        response = api_service.end_battle(battle_id, surrender=surrender)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/battles/{battle_id}",
        response_model=EndBattleResponse,
        tags=["Battles"],
        summary="Delete a battle",
    )
    async def delete_battle(battle_id: str) -> EndBattleResponse:
        """Release a battle. A running battle is surrendered first, with the usual penalty."""
        success = api_service.delete_battle(battle_id)
        return EndBattleResponse(success=success, battle_id=battle_id)

    # =========================================================================
    # Profile and Content
    # =========================================================================

    @app.get(
        "/api/v1/profile",
        response_model=ProfileResponse,
        tags=["Profile"],
        summary="Get the player profile",
    )
    async def get_profile() -> ProfileResponse:
        """The persistent profile, including broken cards in the graveyard."""
        return api_service.get_profile()

    @app.get(
        "/api/v1/monsters",
        response_model=MonsterListResponse,
        tags=["Content"],
        summary="List monsters",
    )
    async def list_monsters() -> MonsterListResponse:
        """All monsters that can be battled."""
        return api_service.list_monsters()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="soulverse-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Soulverse Duel API",
            "version": "1.0.0",
            "environment": SOULVERSE_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn soulverse.api.app:app
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass

import logging
from typing import Awaitable, List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from redis.asyncio import Redis

from stockgame.db import Session
from stockgame.errors import GameError
from stockgame.game_lock_manager import GameLockManager
from stockgame.load_settings import card_seed, redis_host, redis_port
from stockgame.models.dc_models import (
    ActionRequestModel,
    ActionResultModel,
    CorporateActionPreviewModel,
    CreateGameModel,
    ExcludeEventModel,
    GameCreatedModel,
    LeaderOpportunityGroupModel,
    LeadershipStepModel,
    PortfolioModel,
    RankingModel,
    RightsIssueOfferModel,
    TradeValidationModel,
    TurnResultModel,
)
from stockgame.models.schema_models import CorporateActionSchema, GameStateSchema
from stockgame.redis_subscriber import RedisSubscriber
from stockgame.services.card_generator import CardGenerator
from stockgame.services.game_engine import GameEngine
from stockgame.services.game_service import GameService
from stockgame.services.game_store import SqlGameStore

T = TypeVar("T")

redis = (
    Redis(host=redis_host, port=redis_port, decode_responses=True, health_check_interval=30)
    if redis_host
    else None
)

game_router = APIRouter()
game_service = GameService(
    SqlGameStore(Session),
    GameEngine(CardGenerator(seed=card_seed)),
    GameLockManager(),
    redis,
)


def get_game_service() -> GameService:
    return game_service


async def handle_game_errors(call: Awaitable[T]) -> T:
    """Await a service call, turning GameError into HTTPException

    Args:
        call (Awaitable[T]): Pending GameService call

    Returns:
        T: The call's result
    """
    try:
        return await call
    except GameError as e:
        if e.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logging.error(f"{e.code}: {e.message} {e.details}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


class GameServer:
    @staticmethod
    @game_router.post("/games", response_model=GameCreatedModel, status_code=status.HTTP_201_CREATED)
    async def create_game(
        request: CreateGameModel, service: GameService = Depends(get_game_service)
    ) -> GameCreatedModel:
        """Create a game and deal the round-1 hands

        Args:
            request (CreateGameModel):
                    playerNames: List[str] (1 to 4 names, in turn order)
                    maxRounds: int
                    turnsPerRound: int

        Returns:
            GameCreatedModel: The new game's id
        """
        state = await handle_game_errors(
            service.create_game(request.player_names, request.max_rounds, request.turns_per_round)
        )
        return GameCreatedModel(game_id=state.id)

    @staticmethod
    @game_router.get("/games/{game_id}", response_model=GameStateSchema)
    async def get_game(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.get_game_state(game_id))

    @staticmethod
    @game_router.get("/games/{game_id}/stream")
    async def stream_game_state(game_id: str, service: GameService = Depends(get_game_service)):
        if service.redis is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Redis is not configured.",
            )
        await handle_game_errors(service.get_game_state(game_id))
        channel = f"game:{game_id}"
        redis_subscriber = RedisSubscriber(service.store, game_id)

        return StreamingResponse(
            redis_subscriber.event_generator(channel, service.redis),
            media_type="text/event-stream; charset=utf-8",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )


class TurnServer:
    @staticmethod
    @game_router.post("/games/{game_id}/actions", response_model=ActionResultModel)
    async def execute_action(
        game_id: str,
        request: ActionRequestModel,
        service: GameService = Depends(get_game_service),
    ):
        """Run an action of the current player

        Args:
            game_id (str): To identify the game
            request (ActionRequestModel): buy | sell | skip | play_corporate_action | exercise_right_issue

        Returns:
            ActionResultModel: success is False when the action failed validation
        """
        return await handle_game_errors(service.execute_action(game_id, request))

    @staticmethod
    @game_router.post("/games/{game_id}/end-turn", response_model=TurnResultModel)
    async def end_turn(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.end_turn(game_id))


class LeadershipServer:
    @staticmethod
    @game_router.get(
        "/games/{game_id}/leadership", response_model=List[LeaderOpportunityGroupModel]
    )
    async def get_leadership(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.get_leader_opportunity_groups(game_id))

    @staticmethod
    @game_router.post("/games/{game_id}/leadership/exclude", response_model=ActionResultModel)
    async def exclude_event(
        game_id: str,
        request: ExcludeEventModel,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(
            service.exclude_event(game_id, request.leader_id, request.event_id, request.symbol)
        )

    @staticmethod
    @game_router.post("/games/{game_id}/leadership/next", response_model=LeadershipStepModel)
    async def next_leader(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.next_leader(game_id))

    @staticmethod
    @game_router.post("/games/{game_id}/leadership/complete", response_model=LeadershipStepModel)
    async def complete_round(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.complete_round(game_id))


class QueryServer:
    @staticmethod
    @game_router.get("/games/{game_id}/portfolio", response_model=PortfolioModel)
    async def get_portfolio(
        game_id: str,
        player_id: Optional[str] = None,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(service.get_portfolio(game_id, player_id))

    @staticmethod
    @game_router.get("/games/{game_id}/validate-trade", response_model=TradeValidationModel)
    async def validate_trade(
        game_id: str,
        type: str,
        symbol: str,
        quantity: Optional[int] = None,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(service.validate_trade(game_id, type, symbol, quantity))

    @staticmethod
    @game_router.get("/games/{game_id}/rankings", response_model=List[RankingModel])
    async def get_rankings(game_id: str, service: GameService = Depends(get_game_service)):
        return await handle_game_errors(service.get_rankings(game_id))

    @staticmethod
    @game_router.get(
        "/games/{game_id}/corporate-actions", response_model=List[CorporateActionSchema]
    )
    async def get_corporate_actions(
        game_id: str,
        player_id: Optional[str] = None,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(service.get_player_corporate_actions(game_id, player_id))

    @staticmethod
    @game_router.get(
        "/games/{game_id}/rights-issues", response_model=List[RightsIssueOfferModel]
    )
    async def get_rights_issues(
        game_id: str,
        player_id: Optional[str] = None,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(service.get_active_rights_issues(game_id, player_id))

    @staticmethod
    @game_router.get(
        "/games/{game_id}/corporate-actions/{action_id}/preview",
        response_model=CorporateActionPreviewModel,
    )
    async def preview_corporate_action(
        game_id: str,
        action_id: str,
        symbol: str,
        quantity: Optional[int] = None,
        service: GameService = Depends(get_game_service),
    ):
        return await handle_game_errors(
            service.preview_corporate_action(game_id, action_id, symbol, quantity)
        )

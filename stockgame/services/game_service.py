"""Async facade over the game engine.

Each mutation is one load -> engine transition -> save cycle run under the
game's lock. Nothing is saved when the engine raises, and a failed action
leaves the stored state as it was. Subscribers are notified on the redis
channel game:{game_id} after every committed change.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple, TypeVar

from redis.asyncio import Redis

from stockgame.game_lock_manager import GameLockManager
from stockgame.models.dc_models import (
    ActionRequestModel,
    ActionResultModel,
    CorporateActionPreviewModel,
    ExclusionOpportunityModel,
    LeaderOpportunityGroupModel,
    LeadershipStepModel,
    PortfolioModel,
    RankingModel,
    RightsIssueOfferModel,
    TradeValidationModel,
    TurnResultModel,
)
from stockgame.models.schema_models import CorporateActionSchema, GameStateSchema
from stockgame.services import game_queries
from stockgame.services.game_engine import GameEngine
from stockgame.services.game_store import GameStore

T = TypeVar("T")


class GameService:
    def __init__(
        self,
        store: GameStore,
        engine: Optional[GameEngine] = None,
        lock_manager: Optional[GameLockManager] = None,
        redis: Optional[Redis] = None,
    ):
        self.store = store
        self.engine = engine or GameEngine()
        self.lock_manager = lock_manager or GameLockManager()
        self.redis = redis

    async def publish(self, game_id: str) -> None:
        if self.redis is None:
            return
        channel = f"game:{game_id}"
        await self.redis.publish(channel, game_id)

    async def _transition(
        self,
        game_id: str,
        step: Callable[[GameStateSchema], Tuple[T, GameStateSchema]],
        changed: Callable[[T], bool] = lambda result: True,
    ) -> T:
        """Run one engine transition on the stored game

        Args:
            game_id (str): To identify the game
            step (Callable): Engine call returning (result, new_state)
            changed (Callable): Whether the result means the state changed and must be saved

        Returns:
            T: The engine's result
        """
        lock = await self.lock_manager.get_lock(game_id)
        async with lock:
            state = await self.store.load(game_id)
            result, new_state = step(state)
            if not changed(result):
                return result
            await self.store.save(game_id, new_state)
        await self.publish(game_id)
        return result

    async def create_game(
        self, player_names: List[str], max_rounds: int, turns_per_round: int
    ) -> GameStateSchema:
        state = self.engine.create_game(player_names, max_rounds, turns_per_round)
        await self.store.create(state)
        return state

    async def get_game_state(self, game_id: str) -> GameStateSchema:
        return await self.store.load(game_id)

    async def execute_action(self, game_id: str, request: ActionRequestModel) -> ActionResultModel:
        return await self._transition(
            game_id,
            lambda state: self.engine.execute_action(state, request),
            lambda result: result.success,
        )

    async def end_turn(self, game_id: str) -> TurnResultModel:
        result = await self._transition(game_id, self.engine.end_turn)
        if result.game_over:
            logging.info(f"Game {game_id} is over")
        return result

    async def get_exclusion_opportunities(self, game_id: str) -> List[ExclusionOpportunityModel]:
        return self.engine.get_exclusion_opportunities(await self.store.load(game_id))

    async def get_leader_opportunity_groups(self, game_id: str) -> List[LeaderOpportunityGroupModel]:
        return self.engine.get_leader_opportunity_groups(await self.store.load(game_id))

    async def exclude_event(
        self, game_id: str, leader_id: str, event_id: str, symbol: Optional[str] = None
    ) -> ActionResultModel:
        return await self._transition(
            game_id,
            lambda state: self.engine.exclude_event(state, leader_id, event_id, symbol),
            lambda result: result.success,
        )

    async def next_leader(self, game_id: str) -> LeadershipStepModel:
        return await self._transition(game_id, self.engine.next_leader)

    async def complete_round(self, game_id: str) -> LeadershipStepModel:
        return await self._transition(game_id, self.engine.complete_round)

    async def get_portfolio(self, game_id: str, player_id: Optional[str] = None) -> PortfolioModel:
        return game_queries.get_portfolio(await self.store.load(game_id), player_id)

    async def validate_trade(
        self, game_id: str, trade_type: str, symbol: str, quantity: Optional[int] = None
    ) -> TradeValidationModel:
        return game_queries.validate_trade(await self.store.load(game_id), trade_type, symbol, quantity)

    async def get_rankings(self, game_id: str) -> List[RankingModel]:
        return game_queries.get_rankings(await self.store.load(game_id))

    async def get_player_corporate_actions(
        self, game_id: str, player_id: Optional[str] = None
    ) -> List[CorporateActionSchema]:
        return game_queries.get_player_corporate_actions(await self.store.load(game_id), player_id)

    async def get_active_rights_issues(
        self, game_id: str, player_id: Optional[str] = None
    ) -> List[RightsIssueOfferModel]:
        return game_queries.get_active_rights_issues(await self.store.load(game_id), player_id)

    async def preview_corporate_action(
        self, game_id: str, corporate_action_id: str, symbol: str, quantity: Optional[int] = None
    ) -> CorporateActionPreviewModel:
        return game_queries.preview_corporate_action(
            await self.store.load(game_id), corporate_action_id, symbol, quantity
        )

    async def purge_completed_games(self, retention_hours: int) -> List[str]:
        """Delete completed games untouched for retention_hours, with their locks

        Returns:
            List[str]: Ids of the deleted games
        """
        cutoff = datetime.now() - timedelta(hours=retention_hours)
        game_ids = await self.store.list_completed_before(cutoff)
        for game_id in game_ids:
            await self.store.delete(game_id)
            await self.lock_manager.cleanup(game_id)
        if game_ids:
            logging.info(f"Purged {len(game_ids)} completed games")
        return game_ids

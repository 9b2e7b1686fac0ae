"""Turn/round state machine of a game.

InTurn(player, turn) -> round end -> [leadership exclusion] -> InTurn of the
next round, or complete once current_round passes max_rounds.

Every public method takes a GameStateSchema and returns (result, new_state).
The input state is never modified: work happens on a deep copy, so a raised
error leaves the caller's state exactly as it was.
"""

import logging
from typing import List, Optional, Tuple

from uuid6 import uuid7

from stockgame.domain.game_rules import (
    DEFAULT_MAX_ROUNDS,
    DEFAULT_TURNS_PER_ROUND,
    INITIAL_STOCKS,
    MAX_PLAYERS,
    MAX_STOCK_QUANTITY,
    MIN_PLAYERS,
    STARTING_CASH,
)
from stockgame.errors import (
    GameStateError,
    ValidationError,
    game_complete,
    leadership_phase_active,
)
from stockgame.models.dc_models import (
    ActionRequestModel,
    ActionResultModel,
    ExclusionOpportunityModel,
    LeaderOpportunityGroupModel,
    LeadershipStepModel,
    TurnResultModel,
)
from stockgame.models.schema_models import (
    GameStateSchema,
    PlayerSchema,
    PriceHistoryEntry,
    StockSchema,
)
from stockgame.services import leadership_exclusion
from stockgame.services.card_generator import CardGenerator
from stockgame.services.game_state_manager import check_supply, current_player, refresh_leadership
from stockgame.services.round_processor import deal_hands, expire_rights_issues, finalize_round
from stockgame.services.trade_executor import execute_trade


class GameEngine:
    def __init__(self, card_generator: Optional[CardGenerator] = None):
        self.card_generator = card_generator or CardGenerator()

    def create_game(
        self,
        player_names: List[str],
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        turns_per_round: int = DEFAULT_TURNS_PER_ROUND,
    ) -> GameStateSchema:
        """Set up a new game with round-1 hands dealt

        Args:
            player_names (List[str]): Names in turn order
            max_rounds (int, optional): Rounds before the game completes
            turns_per_round (int, optional): Turns each player gets per round

        Returns:
            GameStateSchema: The initial state
        """
        names = [name.strip() for name in player_names]
        if not MIN_PLAYERS <= len(names) <= MAX_PLAYERS:
            raise ValidationError(f"A game needs {MIN_PLAYERS} to {MAX_PLAYERS} players")
        if any(not name for name in names):
            raise ValidationError("Player names must not be empty")
        if max_rounds < 1 or turns_per_round < 1:
            raise ValidationError("maxRounds and turnsPerRound must be at least 1")

        state = GameStateSchema(
            id=str(uuid7()),
            max_rounds=max_rounds,
            turns_per_round=turns_per_round,
            players=[PlayerSchema(id=str(uuid7()), name=name, cash=STARTING_CASH) for name in names],
            stocks=[
                StockSchema(
                    symbol=stock["symbol"],
                    name=stock["name"],
                    sector=stock["sector"],
                    price=stock["price"],
                    available_quantity=MAX_STOCK_QUANTITY,
                    total_quantity=MAX_STOCK_QUANTITY,
                    price_history=[PriceHistoryEntry(round=0, price=stock["price"])],
                )
                for stock in INITIAL_STOCKS
            ],
        )
        deal_hands(state, self.card_generator)
        logging.info(f"Created game {state.id} for {len(names)} players, {max_rounds} rounds")
        return state

    @staticmethod
    def _ensure_playable(state: GameStateSchema) -> None:
        if state.is_complete:
            raise game_complete()
        if leadership_exclusion.is_phase_active(state):
            raise leadership_phase_active()

    def execute_action(
        self, state: GameStateSchema, request: ActionRequestModel
    ) -> Tuple[ActionResultModel, GameStateSchema]:
        """Run a buy/sell/skip/corporate-action request for the current player

        Returns:
            Tuple[ActionResultModel, GameStateSchema]: Result and the new state
                (the untouched input state when the action failed validation)
        """
        self._ensure_playable(state)
        player = current_player(state)
        if request.player_id is not None and request.player_id != player.id:
            raise GameStateError(
                "Not your turn", {"playerId": request.player_id, "currentPlayerId": player.id}
            )

        new_state = state.model_copy(deep=True)
        result = execute_trade(new_state, current_player(new_state), request)
        if not result.success:
            return result, state
        check_supply(new_state)
        return result, new_state

    def end_turn(self, state: GameStateSchema) -> Tuple[TurnResultModel, GameStateSchema]:
        """Pass the turn on; runs round-end processing when the round's turns are used up."""
        self._ensure_playable(state)
        new_state = state.model_copy(deep=True)

        next_index = (new_state.current_player_index + 1) % len(new_state.players)
        # the next player's own rights issues close as their turn comes round again
        expire_rights_issues(new_state, new_state.players[next_index].id)

        if next_index != 0:
            new_state.current_player_index = next_index
            return TurnResultModel(), new_state

        if new_state.current_turn_in_round < new_state.turns_per_round:
            new_state.current_turn_in_round += 1
            new_state.current_player_index = 0
            return TurnResultModel(), new_state

        new_state.current_player_index = 0
        refresh_leadership(new_state)
        leader_ids = leadership_exclusion.start_phase(new_state)
        if leader_ids:
            return (
                TurnResultModel(
                    leadership_phase_required=True,
                    leaders=leadership_exclusion.build_leader_infos(new_state, leader_ids),
                ),
                new_state,
            )

        finalize_round(new_state, self.card_generator)
        return TurnResultModel(round_ended=True, game_over=new_state.is_complete), new_state

    def get_exclusion_opportunities(self, state: GameStateSchema) -> List[ExclusionOpportunityModel]:
        return leadership_exclusion.get_exclusion_opportunities(state)

    def get_leader_opportunity_groups(
        self, state: GameStateSchema
    ) -> List[LeaderOpportunityGroupModel]:
        return leadership_exclusion.get_leader_opportunity_groups(state)

    def exclude_event(
        self, state: GameStateSchema, leader_id: str, event_id: str, symbol: Optional[str] = None
    ) -> Tuple[ActionResultModel, GameStateSchema]:
        new_state = state.model_copy(deep=True)
        result = leadership_exclusion.exclude_event(new_state, leader_id, event_id, symbol)
        if not result.success:
            return result, state
        return result, new_state

    def next_leader(self, state: GameStateSchema) -> Tuple[LeadershipStepModel, GameStateSchema]:
        """Hand the exclusion phase to the next leader, finalizing the round after the last one."""
        new_state = state.model_copy(deep=True)
        leader_ids = list(leadership_exclusion.active_status(new_state).leader_ids)
        if not leadership_exclusion.advance_leader(new_state):
            return (
                LeadershipStepModel(
                    completed=False,
                    next_leader_index=new_state.leadership_exclusion_status.current_leader_index,
                ),
                new_state,
            )
        finalize_round(new_state, self.card_generator, leader_ids)
        return (
            LeadershipStepModel(completed=True, round_ended=True, game_over=new_state.is_complete),
            new_state,
        )

    def complete_round(self, state: GameStateSchema) -> Tuple[LeadershipStepModel, GameStateSchema]:
        """Close the exclusion phase from the final leader and finalize the round."""
        if not leadership_exclusion.is_final_leader(state):
            raise GameStateError("Only the final leader can complete the round")
        return self.next_leader(state)

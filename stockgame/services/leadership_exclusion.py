"""Leadership-exclusion sub-phase between the last turn and round finalization.

Leaders take turns in a fixed order. A chairman may exclude any pending event
touching their stock. A director has exclusion rights only on stocks without
a chairman, and only over events from their own hand. Each leader may use
each of their stocks for at most one exclusion per leader-turn.

Every function reads and writes only LeadershipExclusionStatus on the game,
so the phase resumes from stored state across separate requests.
"""

import logging
from typing import List, Optional, Tuple

from stockgame.domain.leadership import collect_leader_ids
from stockgame.errors import (
    GameStateError,
    NotFoundError,
    UnauthorizedError,
    leadership_phase_not_active,
)
from stockgame.models.dc_models import (
    ActionResultModel,
    ExclusionOpportunityModel,
    LeaderInfoModel,
    LeaderOpportunityGroupModel,
    LeaderStockModel,
)
from stockgame.models.schema_models import (
    GameStateSchema,
    LeadershipExclusionStatusSchema,
    MarketEventSchema,
    StockSchema,
    TradeActionSchema,
)
from stockgame.services.game_state_manager import find_holding, find_player, log_action
from stockgame.services.round_processor import round_events


def start_phase(state: GameStateSchema) -> List[str]:
    """Open the phase when at least one player chairs or directs a stock

    Returns:
        List[str]: Leader ids in phase order, empty when there is no phase
    """
    leader_ids = collect_leader_ids(state.stocks)
    if not leader_ids:
        return []
    state.leadership_exclusion_status = LeadershipExclusionStatusSchema(
        phase="active",
        leader_ids=leader_ids,
        current_leader_index=0,
        total_leaders=len(leader_ids),
    )
    logging.info(f"Game {state.id} round {state.current_round}: leadership phase for {leader_ids}")
    return leader_ids


def is_phase_active(state: GameStateSchema) -> bool:
    status = state.leadership_exclusion_status
    return status is not None and status.phase == "active"


def active_status(state: GameStateSchema) -> LeadershipExclusionStatusSchema:
    if not is_phase_active(state):
        raise leadership_phase_not_active()
    return state.leadership_exclusion_status


def current_leader_id(state: GameStateSchema) -> str:
    status = active_status(state)
    return status.leader_ids[status.current_leader_index]


def build_leader_infos(state: GameStateSchema, leader_ids: List[str]) -> List[LeaderInfoModel]:
    leaders = []
    for leader_id in leader_ids:
        leader = find_player(state, leader_id)
        stocks = []
        for stock in state.stocks:
            if leader_id not in (stock.chairman_id, stock.director_id):
                continue
            holding = find_holding(leader, stock.symbol)
            quantity = holding.quantity if holding is not None else 0
            stocks.append(
                LeaderStockModel(
                    symbol=stock.symbol,
                    name=stock.name,
                    leader_type="chairman" if stock.chairman_id == leader_id else "director",
                    share_percentage=quantity / stock.total_quantity * 100,
                )
            )
        leaders.append(LeaderInfoModel(player_id=leader_id, player_name=leader.name, stocks=stocks))
    return leaders


def _pending_events(state: GameStateSchema) -> List[MarketEventSchema]:
    return [event for event in round_events(state) if event.excluded_by is None]


def _opportunity_for_stock(
    state: GameStateSchema, stock: StockSchema, events: List[MarketEventSchema]
) -> Optional[ExclusionOpportunityModel]:
    affecting = [event for event in events if stock.symbol in event.affected_stocks]
    if not affecting:
        return None

    if stock.chairman_id is not None:
        leader_id, leader_type, eligible = stock.chairman_id, "chairman", affecting
    elif stock.director_id is not None:
        leader_id, leader_type = stock.director_id, "director"
        eligible = [event for event in affecting if event.player_id == leader_id]
    else:
        return None
    if not eligible:
        return None

    return ExclusionOpportunityModel(
        stock_symbol=stock.symbol,
        stock_name=stock.name,
        leader_id=leader_id,
        leader_name=find_player(state, leader_id).name,
        leader_type=leader_type,
        can_exclude_from_all_players=leader_type == "chairman",
        eligible_events=eligible,
    )


def get_exclusion_opportunities(state: GameStateSchema) -> List[ExclusionOpportunityModel]:
    """Per stock, the events its leader could still exclude this round."""
    events = _pending_events(state)
    opportunities = []
    for stock in state.stocks:
        opportunity = _opportunity_for_stock(state, stock, events)
        if opportunity is not None:
            opportunities.append(opportunity)
    return opportunities


def get_leader_opportunity_groups(state: GameStateSchema) -> List[LeaderOpportunityGroupModel]:
    """Opportunities grouped by leader, in phase order; leaders with none are left out."""
    status = active_status(state)
    opportunities = get_exclusion_opportunities(state)
    groups = []
    for index, leader_id in enumerate(status.leader_ids):
        own = [o for o in opportunities if o.leader_id == leader_id]
        if not own:
            continue
        groups.append(
            LeaderOpportunityGroupModel(
                leader_id=leader_id,
                leader_name=own[0].leader_name,
                leader_index=index,
                total_leaders=status.total_leaders,
                is_current=index == status.current_leader_index,
                opportunities=own,
            )
        )
    return groups


def _find_round_event(state: GameStateSchema, event_id: str) -> MarketEventSchema:
    for event in round_events(state):
        if event.id == event_id:
            return event
    raise NotFoundError(f"Event {event_id} not found in round {state.current_round}", {"eventId": event_id})


def _exclusion_symbols(state: GameStateSchema, leader_id: str, event: MarketEventSchema) -> Tuple[List[str], str]:
    """Affected stocks on which leader_id may exclude event, and the leader's title there."""
    chairman_symbols = []
    director_symbols = []
    for stock in state.stocks:
        if stock.symbol not in event.affected_stocks:
            continue
        if stock.chairman_id == leader_id:
            chairman_symbols.append(stock.symbol)
        elif stock.chairman_id is None and stock.director_id == leader_id:
            director_symbols.append(stock.symbol)

    if chairman_symbols:
        return chairman_symbols, "Chairman"
    if director_symbols:
        if event.player_id != leader_id:
            raise UnauthorizedError(
                "Directors can only exclude events from their own hand",
                {"leaderId": leader_id, "eventPlayerId": event.player_id},
            )
        return director_symbols, "Director"
    raise UnauthorizedError(
        "Player is not a leader of any stock affected by this event",
        {"leaderId": leader_id, "affectedStocks": event.affected_stocks},
    )


def exclude_event(
    state: GameStateSchema, leader_id: str, event_id: str, symbol: Optional[str] = None
) -> ActionResultModel:
    """Exclude one pending event on behalf of the current leader

    Args:
        state (GameStateSchema): Working copy of the game
        leader_id (str): Must be the leader whose turn it is
        event_id (str): Event of the current round
        symbol (Optional[str]): Stock the exclusion is charged to; defaults to the
            first affected stock the leader controls and has not used yet

    Returns:
        ActionResultModel: Unsuccessful when the stock was already used this leader-turn
    """
    status = active_status(state)
    if leader_id != current_leader_id(state):
        raise GameStateError(
            "It is not this leader's turn to exclude events",
            {"leaderId": leader_id, "currentLeaderId": current_leader_id(state)},
        )

    event = _find_round_event(state, event_id)
    if event.excluded_by == leader_id:
        return ActionResultModel(success=True, message=f"Event already excluded: {event.title}")
    if event.excluded_by is not None:
        raise GameStateError(f"Event {event_id} was already excluded", {"eventId": event_id})

    allowed_symbols, leader_label = _exclusion_symbols(state, leader_id, event)
    if symbol is None:
        unused = [s for s in allowed_symbols if s not in status.excluded_symbols]
        symbol = unused[0] if unused else allowed_symbols[0]
    elif symbol not in allowed_symbols:
        raise UnauthorizedError(
            f"No exclusion rights on {symbol} for this event", {"leaderId": leader_id, "symbol": symbol}
        )

    if symbol in status.excluded_symbols:
        return ActionResultModel(
            success=False, message=f"An event affecting {symbol} was already excluded this turn"
        )

    event.excluded_by = leader_id
    status.excluded_symbols.append(symbol)
    leader = find_player(state, leader_id)
    result = f"{leader.name} ({leader_label}) excluded event: {event.title}"
    log_action(
        state,
        leader,
        TradeActionSchema(type="event_excluded", symbol=symbol, event_id=event.id),
        result,
    )
    return ActionResultModel(success=True, message=result)


def advance_leader(state: GameStateSchema) -> bool:
    """Mark the current leader done; returns True when that was the last leader."""
    status = active_status(state)
    status.completed_leader_ids.append(status.leader_ids[status.current_leader_index])
    status.excluded_symbols = []
    if status.current_leader_index + 1 >= status.total_leaders:
        status.phase = "completed"
        return True
    status.current_leader_index += 1
    return False


def is_final_leader(state: GameStateSchema) -> bool:
    status = active_status(state)
    return status.current_leader_index == status.total_leaders - 1

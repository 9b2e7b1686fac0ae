"""Lookups and small mutations shared by the engine services.

Everything here works on a GameStateSchema the caller already copied; the
engine entry points own the copy, so these helpers may mutate freely.
"""

import time
from typing import List, Optional

from stockgame.domain.corporate_actions import ShareholderHolding
from stockgame.domain.leadership import calculate_leadership
from stockgame.domain.pricing import round_currency
from stockgame.errors import InvariantViolationError, NotFoundError
from stockgame.models.schema_models import (
    GameStateSchema,
    PlayerSchema,
    StockHoldingSchema,
    StockSchema,
    TradeActionSchema,
    TurnActionSchema,
)


def now_ms() -> int:
    return int(time.time() * 1000)


def current_player(state: GameStateSchema) -> PlayerSchema:
    return state.players[state.current_player_index]


def find_player(state: GameStateSchema, player_id: str) -> PlayerSchema:
    for player in state.players:
        if player.id == player_id:
            return player
    raise NotFoundError(f"Player {player_id} not found", {"playerId": player_id})


def find_stock(state: GameStateSchema, symbol: str) -> Optional[StockSchema]:
    for stock in state.stocks:
        if stock.symbol == symbol:
            return stock
    return None


def find_holding(player: PlayerSchema, symbol: str) -> Optional[StockHoldingSchema]:
    for holding in player.portfolio:
        if holding.symbol == symbol:
            return holding
    return None


def set_holding(player: PlayerSchema, symbol: str, quantity: int, average_cost: float) -> None:
    """Create, update or (at zero) remove a holding."""
    if quantity < 0:
        raise InvariantViolationError(
            f"Negative holding for {symbol}", {"playerId": player.id, "quantity": quantity}
        )
    holding = find_holding(player, symbol)
    if quantity == 0:
        if holding is not None:
            player.portfolio.remove(holding)
        return
    if holding is None:
        player.portfolio.append(
            StockHoldingSchema(symbol=symbol, quantity=quantity, average_cost=average_cost)
        )
    else:
        holding.quantity = quantity
        holding.average_cost = average_cost


def adjust_cash(player: PlayerSchema, delta: float) -> None:
    new_cash = round_currency(player.cash + delta)
    if new_cash < 0:
        raise InvariantViolationError(
            f"Cash of {player.name} would drop below zero", {"playerId": player.id}
        )
    player.cash = new_cash


def shareholders_of(state: GameStateSchema, symbol: str) -> List[ShareholderHolding]:
    shareholders = []
    for player in state.players:
        holding = find_holding(player, symbol)
        if holding is not None and holding.quantity > 0:
            shareholders.append(
                ShareholderHolding(player.id, player.name, holding.quantity, holding.average_cost)
            )
    return shareholders


def log_action(
    state: GameStateSchema,
    player: PlayerSchema,
    action: TradeActionSchema,
    result: str,
    price: Optional[float] = None,
    total_value: Optional[float] = None,
) -> None:
    player.action_history.append(
        TurnActionSchema(
            round=state.current_round,
            turn=state.current_turn_in_round,
            action=action,
            price=price,
            total_value=round_currency(total_value) if total_value is not None else None,
            result=result,
            timestamp=now_ms(),
        )
    )


def refresh_leadership(state: GameStateSchema) -> None:
    """Recompute chairman/director of every stock from current holdings."""
    for stock in state.stocks:
        leadership = calculate_leadership(
            state.players,
            stock.symbol,
            stock.total_quantity,
            stock.chairman_id,
            stock.director_id,
        )
        stock.chairman_id = leadership.chairman_id
        stock.director_id = leadership.director_id


def check_supply(state: GameStateSchema) -> None:
    """available + held must equal the issued cap for every stock."""
    for stock in state.stocks:
        held = sum(
            holding.quantity
            for player in state.players
            for holding in player.portfolio
            if holding.symbol == stock.symbol
        )
        if stock.available_quantity < 0 or stock.available_quantity + held != stock.total_quantity:
            raise InvariantViolationError(
                f"Supply of {stock.symbol} is inconsistent",
                {
                    "symbol": stock.symbol,
                    "available": stock.available_quantity,
                    "held": held,
                    "total": stock.total_quantity,
                },
            )

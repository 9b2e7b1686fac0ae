import pytest

from stockgame.models.dc_models import ActionRequestModel
from stockgame.models.schema_models import MarketEventSchema, StockHoldingSchema
from stockgame.services.card_generator import CardGenerator
from stockgame.services.game_engine import GameEngine


@pytest.fixture
def engine():
    return GameEngine(CardGenerator(seed=1234))


@pytest.fixture
def solo_game(engine):
    return engine.create_game(["Alice"], max_rounds=2, turns_per_round=1)


@pytest.fixture
def duo_game(engine):
    return engine.create_game(["Alice", "Bob"], max_rounds=3, turns_per_round=2)


def make_event(event_id, player_id, impact, affected_stocks, round_number=1, event_type=None):
    if event_type is None:
        event_type = "positive" if impact >= 0 else "negative"
    return MarketEventSchema(
        id=event_id,
        type=event_type,
        title=f"Event {event_id}",
        description="test event",
        affected_stocks=affected_stocks,
        impact=impact,
        round=round_number,
        player_id=player_id,
    )


def give_shares(state, player_index, symbol, quantity, average_cost=100.0):
    """Put shares straight into a player's portfolio, keeping supply consistent."""
    player = state.players[player_index]
    player.portfolio.append(
        StockHoldingSchema(symbol=symbol, quantity=quantity, average_cost=average_cost)
    )
    stock = next(s for s in state.stocks if s.symbol == symbol)
    stock.available_quantity -= quantity


def set_events(state, events_by_player):
    """Replace the dealt hands with fixed events and no corporate actions."""
    for player in state.players:
        player.events = events_by_player.get(player.id, [])
        player.corporate_actions = []


def buy(symbol, quantity, player_id=None):
    return ActionRequestModel(type="buy", symbol=symbol, quantity=quantity, player_id=player_id)


def sell(symbol, quantity):
    return ActionRequestModel(type="sell", symbol=symbol, quantity=quantity)


def stock_of(state, symbol):
    return next(s for s in state.stocks if s.symbol == symbol)

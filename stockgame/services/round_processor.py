"""Round-end finalization.

Runs once per round, after any leadership exclusions have been collected:
apply events, expire rights issues, record prices, archive cards, deal the
next hands and advance the round counter.
"""

import logging
from typing import Dict, Iterable, List, Optional

from stockgame.domain.events import does_event_affect_stock, is_cash_event
from stockgame.domain.pricing import apply_cash_impact, apply_price_impact, round_currency
from stockgame.errors import InvariantViolationError
from stockgame.models.schema_models import (
    GameStateSchema,
    MarketEventSchema,
    PriceHistoryEntry,
    TradeActionSchema,
)
from stockgame.services.card_generator import CardGenerator
from stockgame.services.game_state_manager import (
    check_supply,
    log_action,
    refresh_leadership,
)


def round_events(state: GameStateSchema) -> List[MarketEventSchema]:
    """Events dealt this round, in player order then hand order."""
    return [event for player in state.players for event in player.events]


def apply_round_events(state: GameStateSchema) -> List[MarketEventSchema]:
    """Apply every non-excluded event of the round

    Stock events are folded per stock in event order with the price clamped
    at zero after each step. Each applied event records, per symbol, the
    price change it caused and that change as a percent of the pre-round
    price. Cash events are summed into one net percent applied to every
    player's cash.

    Args:
        state (GameStateSchema): Working copy of the game

    Returns:
        List[MarketEventSchema]: The events that were applied
    """
    applied = [event for event in round_events(state) if event.excluded_by is None]
    pre_round_prices: Dict[str, float] = {stock.symbol: stock.price for stock in state.stocks}

    net_cash_percent = 0.0
    for event in applied:
        if is_cash_event(event.type):
            net_cash_percent += event.impact
            event.price_diff = {symbol: 0.0 for symbol in pre_round_prices}
            event.actual_impact = {symbol: 0.0 for symbol in pre_round_prices}
            continue

        price_diff: Dict[str, float] = {}
        actual_impact: Dict[str, float] = {}
        for stock in state.stocks:
            if not does_event_affect_stock(event.affected_stocks, stock.symbol):
                price_diff[stock.symbol] = 0.0
                actual_impact[stock.symbol] = 0.0
                continue
            new_price = apply_price_impact(stock.price, event.impact)
            diff = round_currency(new_price - stock.price)
            pre_round_price = pre_round_prices[stock.symbol]
            price_diff[stock.symbol] = diff
            actual_impact[stock.symbol] = (
                round_currency(diff / pre_round_price * 100) if pre_round_price > 0 else 0.0
            )
            stock.price = new_price
        event.price_diff = price_diff
        event.actual_impact = actual_impact

    if net_cash_percent != 0:
        apply_net_cash_impact(state, net_cash_percent)

    logging.info(
        f"Round {state.current_round}: applied {len(applied)} events, "
        f"net cash impact {net_cash_percent}%"
    )
    return applied


def apply_net_cash_impact(state: GameStateSchema, percent: float) -> None:
    action_type = "deflation_gain" if percent > 0 else "inflation_loss"
    for player in state.players:
        new_cash = apply_cash_impact(player.cash, percent)
        cash_change = round_currency(new_cash - player.cash)
        player.cash = new_cash
        if percent > 0:
            description = f"Deflation: +{abs(percent):g}% purchasing power (+${abs(cash_change):.2f})"
        else:
            description = f"Inflation: -{abs(percent):g}% purchasing power (-${abs(cash_change):.2f})"
        log_action(
            state, player, TradeActionSchema(type=action_type), description, total_value=cash_change
        )


def expire_rights_issues(state: GameStateSchema, expires_at_player_id: Optional[str] = None) -> int:
    """Expire active rights issues, all of them or only those tied to one player.

    Returns:
        int: Number of offers expired
    """
    expired = 0
    for player in state.players:
        for corporate_action in player.corporate_actions:
            if corporate_action.type != "right_issue" or corporate_action.status != "active":
                continue
            if expires_at_player_id is None or corporate_action.expires_at_player_id == expires_at_player_id:
                corporate_action.status = "expired"
                expired += 1
    return expired


def append_price_history(state: GameStateSchema) -> None:
    for stock in state.stocks:
        stock.price_history.append(
            PriceHistoryEntry(round=state.current_round, price=round_currency(stock.price))
        )


def check_leaders_consistent(state: GameStateSchema, leader_ids: Iterable[str]) -> None:
    """Every leader of the exclusion phase must still chair or direct some stock."""
    current_leaders = {
        leader_id
        for stock in state.stocks
        for leader_id in (stock.chairman_id, stock.director_id)
        if leader_id is not None
    }
    unknown = [leader_id for leader_id in leader_ids if leader_id not in current_leaders]
    if unknown:
        raise InvariantViolationError(
            "Leader list is inconsistent with computed leadership", {"leaderIds": unknown}
        )


def archive_round_cards(state: GameStateSchema) -> None:
    for player in state.players:
        state.event_history.extend(player.events)
        state.corporate_action_history.extend(player.corporate_actions)
        player.events = []
        player.corporate_actions = []


def deal_hands(state: GameStateSchema, card_generator: CardGenerator) -> None:
    hands = card_generator.deal_round([player.id for player in state.players], state.current_round)
    for player in state.players:
        player.events, player.corporate_actions = hands[player.id]


def finalize_round(
    state: GameStateSchema,
    card_generator: CardGenerator,
    leader_ids: Optional[List[str]] = None,
) -> None:
    """Finish the current round in place on the working copy

    Args:
        state (GameStateSchema): Working copy of the game
        card_generator (CardGenerator): Deals the next round's hands
        leader_ids (Optional[List[str]]): Leaders of the exclusion phase that just ended, if any
    """
    apply_round_events(state)
    expire_rights_issues(state)
    append_price_history(state)

    refresh_leadership(state)
    if leader_ids:
        check_leaders_consistent(state, leader_ids)
    check_supply(state)

    archive_round_cards(state)
    state.leadership_exclusion_status = None
    state.current_round += 1
    state.current_turn_in_round = 1
    state.current_player_index = 0

    if state.current_round > state.max_rounds:
        state.is_complete = True
        logging.info(f"Game {state.id} complete after {state.max_rounds} rounds")
        return

    deal_hands(state, card_generator)
    logging.info(f"Game {state.id} advanced to round {state.current_round}")

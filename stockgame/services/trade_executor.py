"""Applies one player action (trade or corporate action) to a game state.

Validation failures return ActionResultModel(success=False) before anything
is touched. The state passed in is the engine's working copy.
"""

import logging
from typing import List, Optional

from stockgame.domain.corporate_actions import (
    calculate_bonus_issue_distribution,
    calculate_dividend_distribution,
    calculate_right_issue_entitlement,
    calculate_right_issue_price,
)
from stockgame.domain.game_rules import MAX_STOCK_QUANTITY
from stockgame.domain.pricing import round_currency
from stockgame.domain.trading import (
    calculate_buy_portfolio_update,
    calculate_sale_profit,
    calculate_sell_portfolio_update,
    validate_buy_trade,
    validate_sell_trade,
)
from stockgame.models.dc_models import ActionRequestModel, ActionResultModel, ToastModel
from stockgame.models.schema_models import (
    CorporateActionSchema,
    GameStateSchema,
    PlayerSchema,
    StockSchema,
    TradeActionSchema,
)
from stockgame.services.game_state_manager import (
    adjust_cash,
    find_holding,
    find_player,
    find_stock,
    log_action,
    refresh_leadership,
    set_holding,
    shareholders_of,
)


def failure(message: str) -> ActionResultModel:
    return ActionResultModel(success=False, message=message)


def execute_trade(
    state: GameStateSchema, player: PlayerSchema, request: ActionRequestModel
) -> ActionResultModel:
    """Dispatch an action request for the current player

    Args:
        state (GameStateSchema): Working copy of the game
        player (PlayerSchema): The acting (current) player inside that copy
        request (ActionRequestModel): What the player wants to do

    Returns:
        ActionResultModel: success flag, message and optional toasts
    """
    if request.type == "skip":
        log_action(state, player, TradeActionSchema(type="skip"), "Turn skipped")
        return ActionResultModel(success=True, message="Turn skipped")

    if request.type == "play_corporate_action":
        return play_corporate_action(state, player, request)

    if request.type == "exercise_right_issue":
        return exercise_right_issue(state, player, request)

    if not request.symbol or request.quantity is None:
        return failure("Invalid trade action")

    stock = find_stock(state, request.symbol)
    if stock is None:
        return failure("Stock not found")

    if request.type == "buy":
        return execute_buy(state, player, stock, request.quantity)
    if request.type == "sell":
        return execute_sell(state, player, stock, request.quantity)
    return failure("Invalid trade action type")


def execute_buy(
    state: GameStateSchema, player: PlayerSchema, stock: StockSchema, quantity: int
) -> ActionResultModel:
    validation = validate_buy_trade(quantity, stock.price, stock.available_quantity, player.cash)
    if not validation.is_valid:
        return failure(validation.error)

    total_cost = stock.price * quantity
    holding = find_holding(player, stock.symbol)
    if holding is None:
        set_holding(player, stock.symbol, quantity, round_currency(stock.price))
    else:
        update = calculate_buy_portfolio_update(
            holding.quantity, holding.average_cost, quantity, stock.price
        )
        set_holding(player, stock.symbol, update.new_quantity, update.new_average_cost)

    stock.available_quantity -= quantity
    adjust_cash(player, -total_cost)

    message = f"Bought {quantity} shares of {stock.symbol} for ${total_cost:.2f}"
    log_action(
        state,
        player,
        TradeActionSchema(type="buy", symbol=stock.symbol, quantity=quantity),
        message,
        price=stock.price,
        total_value=total_cost,
    )
    refresh_leadership(state)
    return ActionResultModel(success=True, message=message)


def execute_sell(
    state: GameStateSchema, player: PlayerSchema, stock: StockSchema, quantity: int
) -> ActionResultModel:
    holding = find_holding(player, stock.symbol)
    holding_quantity = holding.quantity if holding is not None else 0
    validation = validate_sell_trade(quantity, stock.price, holding_quantity)
    if not validation.is_valid:
        return failure(validation.error)

    total_revenue = stock.price * quantity
    profit = calculate_sale_profit(quantity, stock.price, holding.average_cost)
    update = calculate_sell_portfolio_update(holding.quantity, holding.average_cost, quantity)
    set_holding(player, stock.symbol, update.new_quantity, update.new_average_cost)

    stock.available_quantity += quantity
    adjust_cash(player, total_revenue)

    if profit > 0:
        profit_text = f"(+${profit:.2f} profit)"
    elif profit < 0:
        profit_text = f"(${abs(profit):.2f} loss)"
    else:
        profit_text = "(breakeven)"
    message = f"Sold {quantity} shares of {stock.symbol} for ${total_revenue:.2f} {profit_text}"
    log_action(
        state,
        player,
        TradeActionSchema(type="sell", symbol=stock.symbol, quantity=quantity),
        message,
        price=stock.price,
        total_value=total_revenue,
    )
    refresh_leadership(state)
    return ActionResultModel(success=True, message=message)


def find_corporate_action(state: GameStateSchema, action_id: str) -> Optional[CorporateActionSchema]:
    for player in state.players:
        for corporate_action in player.corporate_actions:
            if corporate_action.id == action_id:
                return corporate_action
    return None


def play_corporate_action(
    state: GameStateSchema, player: PlayerSchema, request: ActionRequestModel
) -> ActionResultModel:
    if not request.corporate_action_id:
        return failure("Corporate action ID required")
    if not request.symbol:
        return failure("Stock symbol required for corporate action")

    corporate_action = next(
        (ca for ca in player.corporate_actions if ca.id == request.corporate_action_id), None
    )
    if corporate_action is None or corporate_action.played:
        return failure("Corporate action not found or already played")

    stock = find_stock(state, request.symbol)
    if stock is None:
        return failure("Stock not found")

    if corporate_action.type == "dividend":
        return declare_dividend(state, player, stock, corporate_action)
    if corporate_action.type == "bonus_issue":
        return declare_bonus_issue(state, player, stock, corporate_action)
    if corporate_action.type == "right_issue":
        return declare_right_issue(state, player, stock, corporate_action, request.quantity)
    return failure("Unknown corporate action type")


def declare_dividend(
    state: GameStateSchema,
    player: PlayerSchema,
    stock: StockSchema,
    corporate_action: CorporateActionSchema,
) -> ActionResultModel:
    distributions = calculate_dividend_distribution(
        stock.price,
        shareholders_of(state, stock.symbol),
        stock.symbol,
        corporate_action.details.dividend_percentage,
    )

    toasts: List[ToastModel] = []
    for distribution in distributions:
        holder = find_player(state, distribution.player_id)
        adjust_cash(holder, distribution.dividend_amount)
        toasts.append(
            ToastModel(
                player_name=distribution.player_name,
                message=f"Received {stock.name} dividend: ${distribution.dividend_amount:.2f}",
            )
        )
        log_action(
            state,
            holder,
            TradeActionSchema(
                type="dividend_received", symbol=stock.symbol, quantity=distribution.quantity
            ),
            f"Received dividend: ${distribution.dividend_amount:.2f}",
            total_value=distribution.dividend_amount,
        )

    corporate_action.symbol = stock.symbol
    corporate_action.played = True
    corporate_action.players_processed = [d.player_id for d in distributions]

    total_dividends = sum(d.dividend_amount for d in distributions)
    percent = corporate_action.details.dividend_percentage * 100
    log_action(
        state,
        player,
        TradeActionSchema(
            type="dividend_declared", symbol=stock.symbol, corporate_action_id=corporate_action.id
        ),
        f"Dividend declared for {stock.name} - Paid ${total_dividends:.2f} to "
        f"{len(distributions)} shareholders ({percent:.0f}% per share)",
        total_value=total_dividends,
    )
    return ActionResultModel(
        success=True,
        message=f"Dividend declared for {stock.name}. Paid to {len(toasts)} shareholders.",
        toasts=toasts,
    )


def declare_bonus_issue(
    state: GameStateSchema,
    player: PlayerSchema,
    stock: StockSchema,
    corporate_action: CorporateActionSchema,
) -> ActionResultModel:
    details = corporate_action.details
    result = calculate_bonus_issue_distribution(
        shareholders_of(state, stock.symbol),
        stock.symbol,
        details.ratio,
        details.base_shares,
        min(stock.total_quantity, MAX_STOCK_QUANTITY),
    )

    toasts: List[ToastModel] = []
    for distribution in result.distributions:
        holder = find_player(state, distribution.player_id)
        set_holding(holder, stock.symbol, distribution.new_quantity, distribution.new_average_cost)
        toasts.append(
            ToastModel(
                player_name=distribution.player_name,
                message=f"Received {distribution.bonus_shares} bonus {stock.name} shares",
            )
        )
        log_action(
            state,
            holder,
            TradeActionSchema(
                type="bonus_received", symbol=stock.symbol, quantity=distribution.bonus_shares
            ),
            f"Received {distribution.bonus_shares} bonus shares",
        )

    # bonus shares come out of the unissued supply
    stock.available_quantity -= result.total_bonus_shares
    corporate_action.symbol = stock.symbol
    corporate_action.played = True
    corporate_action.players_processed = [d.player_id for d in result.distributions]

    bonus_type = "Partial bonus issue" if result.would_exceed_limit else "Bonus issue"
    limit_note = f" (scaled to {result.max_stock_quantity} limit)" if result.would_exceed_limit else ""
    log_action(
        state,
        player,
        TradeActionSchema(
            type="bonus_issue_declared",
            symbol=stock.symbol,
            quantity=result.total_bonus_shares,
            corporate_action_id=corporate_action.id,
        ),
        f"{bonus_type} declared for {stock.name} - Issued {result.total_bonus_shares} shares to "
        f"{len(result.distributions)} shareholders ({details.ratio}:{details.base_shares} ratio){limit_note}",
    )
    if result.would_exceed_limit:
        logging.info(f"Bonus issue on {stock.symbol} scaled down to the {result.max_stock_quantity} cap")

    refresh_leadership(state)
    if result.would_exceed_limit:
        message = (
            f"Partial bonus issue declared for {stock.name} (scaled to fit "
            f"{result.max_stock_quantity} limit). Issued to {len(toasts)} shareholders."
        )
    else:
        message = f"Bonus issue declared for {stock.name}. Issued to {len(toasts)} shareholders."
    return ActionResultModel(success=True, message=message, toasts=toasts)


def declare_right_issue(
    state: GameStateSchema,
    player: PlayerSchema,
    stock: StockSchema,
    corporate_action: CorporateActionSchema,
    quantity: Optional[int],
) -> ActionResultModel:
    """Open a rights issue on a stock, optionally buying the player's own entitlement at once.

    Eligibility is frozen here: every player holding the stock right now.
    The offer stays open until the declaring player's turn comes round again.
    """
    eligible_player_ids = [holder.player_id for holder in shareholders_of(state, stock.symbol)]
    if quantity is not None:
        error = _validate_right_issue_purchase(
            player, stock, corporate_action, quantity, eligible_player_ids
        )
        if error is not None:
            return failure(error)

    corporate_action.symbol = stock.symbol
    corporate_action.played = True
    corporate_action.status = "active"
    corporate_action.expires_at_player_id = player.id
    corporate_action.eligible_player_ids = eligible_player_ids

    details = corporate_action.details
    log_action(
        state,
        player,
        TradeActionSchema(
            type="right_issue_declared", symbol=stock.symbol, corporate_action_id=corporate_action.id
        ),
        f"Right issue announced for {stock.name} - {len(eligible_player_ids)} eligible shareholders "
        f"({details.ratio}:{details.base_shares} ratio)",
    )

    if quantity is None:
        return ActionResultModel(
            success=True,
            message=f"Right issue announced for {stock.name}. "
            f"{len(eligible_player_ids)} shareholders eligible.",
        )
    return _purchase_rights(state, player, stock, corporate_action, quantity)


def exercise_right_issue(
    state: GameStateSchema, player: PlayerSchema, request: ActionRequestModel
) -> ActionResultModel:
    if not request.corporate_action_id:
        return failure("Corporate action ID required")
    if request.quantity is None:
        return failure("Quantity required for right issue")

    corporate_action = find_corporate_action(state, request.corporate_action_id)
    if corporate_action is None or corporate_action.type != "right_issue":
        return failure("Right issue not found")
    if corporate_action.status != "active":
        return failure("Right issue is no longer active")

    stock = find_stock(state, corporate_action.symbol)
    error = _validate_right_issue_purchase(
        player, stock, corporate_action, request.quantity, corporate_action.eligible_player_ids or []
    )
    if error is not None:
        return failure(error)
    return _purchase_rights(state, player, stock, corporate_action, request.quantity)


def _validate_right_issue_purchase(
    player: PlayerSchema,
    stock: StockSchema,
    corporate_action: CorporateActionSchema,
    quantity: int,
    eligible_player_ids: List[str],
) -> Optional[str]:
    if quantity <= 0:
        return "Quantity must be positive"
    if player.id not in eligible_player_ids:
        return f"No {stock.name} holdings - not eligible"
    if player.id in corporate_action.players_processed:
        return "Right issue already exercised"

    holding = find_holding(player, stock.symbol)
    if holding is None:
        return f"No {stock.name} holdings - not eligible"

    details = corporate_action.details
    entitlement = calculate_right_issue_entitlement(holding.quantity, details.ratio, details.base_shares)
    if quantity > entitlement:
        return f"Can only buy up to {entitlement} {stock.name} shares"
    if quantity > stock.available_quantity:
        return f"Only {stock.available_quantity} shares available"

    rights_price = calculate_right_issue_price(stock.price, details.discount_percentage)
    if quantity * rights_price > player.cash:
        return "Insufficient funds"
    return None


def _purchase_rights(
    state: GameStateSchema,
    player: PlayerSchema,
    stock: StockSchema,
    corporate_action: CorporateActionSchema,
    quantity: int,
) -> ActionResultModel:
    details = corporate_action.details
    rights_price = calculate_right_issue_price(stock.price, details.discount_percentage)
    total_cost = quantity * rights_price

    holding = find_holding(player, stock.symbol)
    new_quantity = holding.quantity + quantity
    new_average_cost = round_currency(
        (holding.average_cost * holding.quantity + total_cost) / new_quantity
    )
    set_holding(player, stock.symbol, new_quantity, new_average_cost)
    stock.available_quantity -= quantity
    adjust_cash(player, -total_cost)
    corporate_action.players_processed.append(player.id)

    discount_percent = (1 - details.discount_percentage) * 100
    log_action(
        state,
        player,
        TradeActionSchema(
            type="right_issue_purchased",
            symbol=stock.symbol,
            quantity=quantity,
            corporate_action_id=corporate_action.id,
        ),
        f"Right issue purchased - Bought {quantity} {stock.name} shares at ${rights_price:.2f} "
        f"({details.ratio}:{details.base_shares} ratio, {discount_percent:.0f}% discount)",
        price=rights_price,
        total_value=total_cost,
    )
    refresh_leadership(state)
    return ActionResultModel(
        success=True,
        message=f"Purchased {quantity} {stock.name} shares at ${rights_price:.2f} for ${total_cost:.2f}",
    )

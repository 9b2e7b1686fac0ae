"""Read-side views of a game: portfolio, trade checks, rankings, card previews."""

import math
from typing import List, Optional

from stockgame.domain.corporate_actions import (
    calculate_right_issue_entitlement,
    calculate_right_issue_price,
)
from stockgame.domain.pricing import round_currency
from stockgame.domain.trading import (
    calculate_net_worth,
    calculate_portfolio_value,
    validate_buy_trade,
    validate_sell_trade,
    value_portfolio,
)
from stockgame.errors import NotFoundError, ValidationError
from stockgame.models.dc_models import (
    CorporateActionPreviewModel,
    HoldingModel,
    PortfolioModel,
    RankingModel,
    RightsIssueOfferModel,
    TradeValidationModel,
)
from stockgame.models.schema_models import CorporateActionSchema, GameStateSchema, PlayerSchema
from stockgame.services.game_state_manager import (
    current_player,
    find_holding,
    find_player,
    find_stock,
)


def _player(state: GameStateSchema, player_id: Optional[str]) -> PlayerSchema:
    return find_player(state, player_id) if player_id else current_player(state)


def _prices(state: GameStateSchema) -> dict:
    return {stock.symbol: stock.price for stock in state.stocks}


def get_portfolio(state: GameStateSchema, player_id: Optional[str] = None) -> PortfolioModel:
    player = _player(state, player_id)
    valuation = value_portfolio(player.cash, player.portfolio, _prices(state))
    holdings = [
        HoldingModel(
            symbol=h.symbol,
            name=find_stock(state, h.symbol).name,
            quantity=h.quantity,
            average_cost=h.average_cost,
            current_price=h.current_price,
            total_value=h.total_value,
            profit_loss=h.profit_loss,
            profit_loss_percent=h.profit_loss_percent,
        )
        for h in valuation.holdings
    ]
    return PortfolioModel(
        player_id=player.id,
        player_name=player.name,
        cash=player.cash,
        holdings=holdings,
        total_value=valuation.total_value,
    )


def validate_trade(
    state: GameStateSchema, trade_type: str, symbol: str, quantity: Optional[int] = None
) -> TradeValidationModel:
    """Check a prospective buy/sell of the current player without executing it

    Args:
        state (GameStateSchema): The game
        trade_type (str): "buy" or "sell"
        symbol (str): Stock symbol
        quantity (Optional[int]): Quantity to check; omitted only reports max_quantity

    Returns:
        TradeValidationModel: Validity, error, max quantity and the trade's value
    """
    player = current_player(state)
    stock = find_stock(state, symbol)
    if stock is None:
        return TradeValidationModel(is_valid=False, error="Stock not found")

    if trade_type == "buy":
        validation = validate_buy_trade(
            quantity if quantity is not None else 1, stock.price, stock.available_quantity, player.cash
        )
    elif trade_type == "sell":
        holding = find_holding(player, symbol)
        validation = validate_sell_trade(
            quantity if quantity is not None else 1,
            stock.price,
            holding.quantity if holding is not None else 0,
        )
    else:
        raise ValidationError(f"Unknown trade type {trade_type}")

    if quantity is None:
        return TradeValidationModel(is_valid=True, max_quantity=validation.max_quantity)
    return TradeValidationModel(
        is_valid=validation.is_valid,
        error=validation.error,
        max_quantity=validation.max_quantity,
        total_cost=round_currency(stock.price * quantity),
    )


def get_rankings(state: GameStateSchema) -> List[RankingModel]:
    """Players by net worth, highest first; ties keep turn order."""
    prices = _prices(state)
    rows = []
    for player in state.players:
        portfolio_value = calculate_portfolio_value(player.portfolio, prices)
        rows.append((player, round_currency(portfolio_value), calculate_net_worth(player.cash, portfolio_value)))
    rows.sort(key=lambda row: row[2], reverse=True)
    return [
        RankingModel(
            rank=index + 1,
            player_id=player.id,
            player_name=player.name,
            cash=player.cash,
            portfolio_value=portfolio_value,
            net_worth=net_worth,
        )
        for index, (player, portfolio_value, net_worth) in enumerate(rows)
    ]


def get_player_corporate_actions(
    state: GameStateSchema, player_id: Optional[str] = None
) -> List[CorporateActionSchema]:
    return [ca for ca in _player(state, player_id).corporate_actions if not ca.played]


def get_active_rights_issues(
    state: GameStateSchema, player_id: Optional[str] = None
) -> List[RightsIssueOfferModel]:
    """Active rights issues the player is eligible for, with their current entitlement."""
    player = _player(state, player_id)
    offers = []
    for owner in state.players:
        for corporate_action in owner.corporate_actions:
            if corporate_action.type != "right_issue" or corporate_action.status != "active":
                continue
            if player.id not in (corporate_action.eligible_player_ids or []):
                continue
            stock = find_stock(state, corporate_action.symbol)
            holding = find_holding(player, stock.symbol)
            details = corporate_action.details
            offers.append(
                RightsIssueOfferModel(
                    corporate_action=corporate_action,
                    symbol=stock.symbol,
                    entitlement=calculate_right_issue_entitlement(
                        holding.quantity if holding is not None else 0,
                        details.ratio,
                        details.base_shares,
                    ),
                    price=calculate_right_issue_price(stock.price, details.discount_percentage),
                    already_exercised=player.id in corporate_action.players_processed,
                )
            )
    return offers


def preview_corporate_action(
    state: GameStateSchema, corporate_action_id: str, symbol: str, quantity: Optional[int] = None
) -> CorporateActionPreviewModel:
    """What playing one of the current player's corporate actions on a stock would do."""
    player = current_player(state)
    corporate_action = next(
        (ca for ca in player.corporate_actions if ca.id == corporate_action_id), None
    )
    if corporate_action is None:
        raise NotFoundError(
            "Corporate action not found", {"corporateActionId": corporate_action_id}
        )
    stock = find_stock(state, symbol)
    if stock is None:
        raise NotFoundError(f"Stock {symbol} not found", {"symbol": symbol})

    holding = find_holding(player, symbol)
    held = holding.quantity if holding is not None else 0
    details = corporate_action.details
    preview = CorporateActionPreviewModel(
        is_valid=True,
        corporate_action_id=corporate_action.id,
        type=corporate_action.type,
        symbol=symbol,
        stock_price=stock.price,
        current_holdings=held,
    )

    if details.kind == "dividend":
        dividend_per_share = stock.price * details.dividend_percentage
        preview.dividend_per_share = round_currency(dividend_per_share)
        preview.total_dividend = round_currency(held * dividend_per_share)
        preview.dividend_percent = details.dividend_percentage * 100
    elif details.kind == "right_issue":
        price_per_share = calculate_right_issue_price(stock.price, details.discount_percentage)
        preview.price_per_share = price_per_share
        preview.discount_percent = (1 - details.discount_percentage) * 100
        preview.max_by_holdings = calculate_right_issue_entitlement(held, details.ratio, details.base_shares)
        preview.max_by_market = stock.available_quantity
        preview.max_by_cash = math.floor(player.cash / price_per_share) if price_per_share > 0 else 0
        preview.max_allowed = min(preview.max_by_holdings, preview.max_by_market, preview.max_by_cash)
        preview.ratio = details.ratio
        preview.base_shares = details.base_shares
        if quantity is not None and quantity <= 0:
            preview.is_valid, preview.error = False, "Quantity must be greater than 0"
        elif quantity is not None and quantity > preview.max_allowed:
            preview.is_valid, preview.error = False, f"Maximum allowed is {preview.max_allowed} shares"
    else:
        preview.bonus_shares = (held // details.base_shares) * details.ratio
        preview.new_total_shares = held + preview.bonus_shares
        preview.ratio = details.ratio
        preview.base_shares = details.base_shares
    return preview

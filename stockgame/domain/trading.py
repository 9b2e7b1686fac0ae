"""Trading rules: order validation, cost basis and portfolio valuation.

Pure functions only. Applying a trade to a game state is the trade
executor's job (stockgame.services.trade_executor).
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from stockgame.domain.pricing import round_currency


@dataclass(frozen=True)
class TradeValidation:
    is_valid: bool
    error: Optional[str] = None
    max_quantity: int = 0


@dataclass(frozen=True)
class PortfolioUpdate:
    new_quantity: int
    new_average_cost: float


@dataclass(frozen=True)
class HoldingValuation:
    symbol: str
    quantity: int
    average_cost: float
    current_price: float
    total_value: float
    profit_loss: float
    profit_loss_percent: float


@dataclass(frozen=True)
class PortfolioValuation:
    cash: float
    holdings: List[HoldingValuation] = field(default_factory=list)
    total_value: float = 0.0


def max_affordable_quantity(price: float, available_quantity: int, cash: float) -> int:
    """Largest quantity that is both affordable and still available."""
    if price <= 0:
        return 0
    return max(0, min(math.floor(cash / price), available_quantity))


def validate_buy_trade(
    quantity: int, price: float, available_quantity: int, cash: float
) -> TradeValidation:
    """Validate a buy order.

    Args:
        quantity (int): Shares requested
        price (float): Current price per share
        available_quantity (int): Shares not yet purchased from the market
        cash (float): Buyer's cash

    Returns:
        TradeValidation: is_valid, error message and the largest quantity that would pass
    """
    max_quantity = max_affordable_quantity(price, available_quantity, cash)

    if quantity <= 0:
        return TradeValidation(False, "Quantity must be positive", max_quantity)
    if price <= 0:
        return TradeValidation(False, "Stock cannot be traded at $0", max_quantity)
    if quantity > available_quantity:
        return TradeValidation(
            False, f"Only {available_quantity} shares available", max_quantity
        )
    total_cost = price * quantity
    if total_cost > cash:
        return TradeValidation(
            False,
            f"Insufficient funds. Need ${total_cost:.2f}, have ${cash:.2f}",
            max_quantity,
        )
    return TradeValidation(True, None, max_quantity)


def validate_sell_trade(quantity: int, price: float, holding_quantity: int) -> TradeValidation:
    """Validate a sell order against the seller's current holding."""
    if quantity <= 0:
        return TradeValidation(False, "Quantity must be positive", holding_quantity)
    if price <= 0:
        return TradeValidation(False, "Stock cannot be traded at $0", holding_quantity)
    if holding_quantity == 0:
        return TradeValidation(False, "You do not own any shares of this stock", 0)
    if quantity > holding_quantity:
        return TradeValidation(
            False, f"You only own {holding_quantity} shares", holding_quantity
        )
    return TradeValidation(True, None, holding_quantity)


def calculate_new_average_cost(
    current_quantity: int,
    current_average_cost: float,
    new_quantity: int,
    new_price_per_share: float,
) -> float:
    total_quantity = current_quantity + new_quantity
    if total_quantity <= 0:
        return 0.0
    total_cost = current_quantity * current_average_cost + new_quantity * new_price_per_share
    return total_cost / total_quantity


def calculate_buy_portfolio_update(
    current_quantity: int, current_average_cost: float, buy_quantity: int, buy_price: float
) -> PortfolioUpdate:
    """Weighted-average cost after a buy, rounded to cents."""
    new_average_cost = calculate_new_average_cost(
        current_quantity, current_average_cost, buy_quantity, buy_price
    )
    return PortfolioUpdate(
        new_quantity=current_quantity + buy_quantity,
        new_average_cost=round_currency(new_average_cost),
    )


def calculate_sell_portfolio_update(
    current_quantity: int, current_average_cost: float, sell_quantity: int
) -> PortfolioUpdate:
    # Selling never changes the cost basis of what remains.
    return PortfolioUpdate(
        new_quantity=current_quantity - sell_quantity,
        new_average_cost=current_average_cost,
    )


def calculate_sale_profit(sell_quantity: int, sell_price: float, average_cost: float) -> float:
    return sell_quantity * sell_price - sell_quantity * average_cost


def calculate_holding_value(quantity: int, current_price: float) -> float:
    return quantity * current_price


def calculate_unrealized_profit(quantity: int, current_price: float, average_cost: float) -> float:
    return calculate_holding_value(quantity, current_price) - quantity * average_cost


def calculate_portfolio_value(holdings: Sequence, prices: Dict[str, float]) -> float:
    """Sum price * quantity over holdings (objects with symbol and quantity)."""
    return sum(
        calculate_holding_value(holding.quantity, prices.get(holding.symbol, 0.0))
        for holding in holdings
    )


def calculate_net_worth(cash: float, portfolio_value: float) -> float:
    return round_currency(cash + portfolio_value)


def value_portfolio(cash: float, holdings: Sequence, prices: Dict[str, float]) -> PortfolioValuation:
    """Value a portfolio with per-holding profit/loss against its cost basis.

    Args:
        cash (float): Player cash
        holdings (Sequence): Objects with symbol, quantity and average_cost
        prices (Dict[str, float]): Current price per symbol

    Returns:
        PortfolioValuation: Holdings detail and cash + market value
    """
    valuations: List[HoldingValuation] = []
    for holding in holdings:
        current_price = prices.get(holding.symbol, 0.0)
        total_value = calculate_holding_value(holding.quantity, current_price)
        cost_basis = holding.average_cost * holding.quantity
        profit_loss = total_value - cost_basis
        profit_loss_percent = profit_loss / cost_basis * 100 if cost_basis > 0 else 0.0
        valuations.append(
            HoldingValuation(
                symbol=holding.symbol,
                quantity=holding.quantity,
                average_cost=holding.average_cost,
                current_price=round_currency(current_price),
                total_value=round_currency(total_value),
                profit_loss=round_currency(profit_loss),
                profit_loss_percent=round_currency(profit_loss_percent),
            )
        )

    portfolio_value = sum(valuation.total_value for valuation in valuations)
    return PortfolioValuation(
        cash=cash,
        holdings=valuations,
        total_value=calculate_net_worth(cash, portfolio_value),
    )

from types import SimpleNamespace

from stockgame.domain.trading import (
    calculate_buy_portfolio_update,
    calculate_net_worth,
    calculate_portfolio_value,
    calculate_sale_profit,
    calculate_sell_portfolio_update,
    calculate_unrealized_profit,
    validate_buy_trade,
    validate_sell_trade,
    value_portfolio,
)


def holding(symbol, quantity, average_cost):
    return SimpleNamespace(symbol=symbol, quantity=quantity, average_cost=average_cost)


def test_valid_buy_reports_max_quantity():
    validation = validate_buy_trade(10, 100, 200000, 10000)
    assert validation.is_valid
    assert validation.error is None
    assert validation.max_quantity == 100


def test_max_quantity_is_limited_by_availability():
    assert validate_buy_trade(1, 10, 50, 10000).max_quantity == 50


def test_buy_rejections():
    assert validate_buy_trade(0, 100, 100, 10000).error == "Quantity must be positive"
    assert validate_buy_trade(1, 0, 100, 10000).error == "Stock cannot be traded at $0"
    assert validate_buy_trade(101, 1, 100, 10000).error == "Only 100 shares available"
    assert (
        validate_buy_trade(101, 100, 200000, 10000).error
        == "Insufficient funds. Need $10100.00, have $10000.00"
    )


def test_sell_rejections():
    assert validate_sell_trade(5, 100, 0).error == "You do not own any shares of this stock"
    assert validate_sell_trade(6, 100, 5).error == "You only own 5 shares"
    assert validate_sell_trade(-1, 100, 5).error == "Quantity must be positive"
    assert validate_sell_trade(5, 100, 5).is_valid


def test_buy_update_uses_weighted_average_cost():
    update = calculate_buy_portfolio_update(100, 50, 50, 80)
    assert update.new_quantity == 150
    assert update.new_average_cost == 60


def test_sell_keeps_cost_basis():
    update = calculate_sell_portfolio_update(100, 55.5, 40)
    assert update.new_quantity == 60
    assert update.new_average_cost == 55.5


def test_profit_helpers():
    assert calculate_sale_profit(10, 120, 100) == 200
    assert calculate_unrealized_profit(10, 90, 100) == -100


def test_portfolio_value_and_net_worth():
    holdings = [holding("TECH", 10, 100), holding("BANK", 5, 120)]
    prices = {"TECH": 110, "BANK": 100}
    assert calculate_portfolio_value(holdings, prices) == 1600
    assert calculate_net_worth(1000, 1600) == 2600


def test_value_portfolio_reports_profit_and_loss():
    valuation = value_portfolio(500, [holding("TECH", 10, 100)], {"TECH": 125})
    tech = valuation.holdings[0]
    assert tech.total_value == 1250
    assert tech.profit_loss == 250
    assert tech.profit_loss_percent == 25
    assert valuation.total_value == 1750

from stockgame.domain.corporate_actions import (
    ShareholderHolding,
    calculate_bonus_issue_distribution,
    calculate_dividend_distribution,
    calculate_right_issue_entitlement,
    calculate_right_issue_price,
)


def holder(player_id, quantity, average_cost=100.0):
    return ShareholderHolding(player_id, player_id.title(), quantity, average_cost)


def test_dividend_is_rounded_per_holder():
    distributions = calculate_dividend_distribution(33.33, [holder("a", 7)], "TECH")
    assert distributions[0].dividend_amount == 11.67


def test_dividend_skips_empty_holdings():
    distributions = calculate_dividend_distribution(100, [holder("a", 10), holder("b", 0)], "TECH")
    assert [d.player_id for d in distributions] == ["a"]
    assert distributions[0].dividend_amount == 50


def test_bonus_issue_dilutes_average_cost():
    result = calculate_bonus_issue_distribution([holder("a", 100, 50)], "TECH", 1, 10)
    distribution = result.distributions[0]
    assert distribution.bonus_shares == 10
    assert distribution.new_quantity == 110
    assert distribution.new_average_cost == 45.45
    assert not result.would_exceed_limit


def test_bonus_issue_under_the_cap():
    result = calculate_bonus_issue_distribution(
        [holder("a", 100000, 90), holder("b", 50000, 95)], "TECH", 1, 5
    )
    a, b = result.distributions
    assert (a.new_quantity, a.new_average_cost) == (120000, 75)
    assert (b.new_quantity, b.new_average_cost) == (60000, 79.17)
    assert result.total_bonus_shares == 30000
    assert not result.would_exceed_limit


def test_bonus_issue_is_scaled_to_the_cap():
    result = calculate_bonus_issue_distribution(
        [holder("a", 150000), holder("b", 30000)], "TECH", 1, 5, max_stock_quantity=200000
    )
    a, b = result.distributions
    assert result.would_exceed_limit
    assert a.new_quantity == 166666
    assert b.new_quantity == 33333
    assert result.current_issued_quantity + result.total_bonus_shares <= 200000


def test_bonus_issue_floors_small_holdings():
    result = calculate_bonus_issue_distribution([holder("a", 50, 60), holder("b", 4)], "TECH", 1, 5)
    assert len(result.distributions) == 1
    assert result.distributions[0].new_quantity == 60
    assert result.distributions[0].new_average_cost == 50


def test_right_issue_terms():
    assert calculate_right_issue_entitlement(101, 1, 2) == 50
    assert calculate_right_issue_entitlement(0, 1, 2) == 0
    assert calculate_right_issue_price(110, 0.5) == 55
    assert calculate_right_issue_price(33.33, 0.5) == 16.67

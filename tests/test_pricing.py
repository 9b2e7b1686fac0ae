import pytest

from stockgame.domain.pricing import (
    apply_cash_impact,
    apply_multiple_price_impacts,
    apply_price_impact,
    calculate_price_change_percentage,
    classify_severity,
    round_currency,
)


def test_apply_price_impact():
    assert apply_price_impact(100, 10) == 110
    assert apply_price_impact(100, -10) == 90
    assert apply_price_impact(100.123, 10.456) == 110.58


def test_price_never_goes_below_floor():
    assert apply_price_impact(100, -200) == 0
    assert apply_price_impact(100, -200, floor=5) == 5


def test_multiple_impacts_clamp_at_every_step():
    # 10 - 20 clamps to 0 before +15 is applied
    assert apply_multiple_price_impacts(10, [-20, 15]) == 15
    assert apply_multiple_price_impacts(100, []) == 100


def test_multiple_impacts_leave_input_untouched():
    impacts = [5, -3]
    apply_multiple_price_impacts(50, impacts)
    assert impacts == [5, -3]


def test_apply_cash_impact():
    assert apply_cash_impact(10000, 3.333) == 10333.3
    assert apply_cash_impact(10000, -5) == 9500
    assert apply_cash_impact(100, -150) == 0


def test_price_change_percentage():
    assert calculate_price_change_percentage(100, 110) == 10
    assert calculate_price_change_percentage(80, 60) == -25
    assert calculate_price_change_percentage(0, 50) == 0


def test_round_currency_rounds_halves_up():
    assert round_currency(0.125) == 0.13
    assert round_currency(2.675) == 2.68


@pytest.mark.parametrize(
    "impact, severity",
    [(5, "low"), (-9.99, "low"), (10, "medium"), (15, "medium"), (20, "high"), (-25, "high"), (30, "extreme"), (-35, "extreme")],
)
def test_classify_severity(impact, severity):
    assert classify_severity(impact) == severity

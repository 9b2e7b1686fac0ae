from types import SimpleNamespace

from stockgame.domain.leadership import (
    calculate_leadership,
    calculate_ownership,
    collect_leader_ids,
    determine_chairman,
    determine_director,
    get_leadership_stocks,
    is_player_leader,
)


def player(player_id, quantity, symbol="TECH"):
    portfolio = [SimpleNamespace(symbol=symbol, quantity=quantity)] if quantity else []
    return SimpleNamespace(id=player_id, portfolio=portfolio)


def stock(symbol, chairman_id=None, director_id=None):
    return SimpleNamespace(symbol=symbol, chairman_id=chairman_id, director_id=director_id)


def test_ownership_is_sorted_with_stable_ties():
    ownership = calculate_ownership(
        [player("a", 100), player("b", 300), player("c", 100)], "TECH", 1000
    )
    assert [o.player_id for o in ownership] == ["b", "a", "c"]
    assert ownership[0].percentage == 30


def test_majority_holder_becomes_chairman():
    # 60% of 20000 issued
    result = calculate_leadership([player("a", 12000), player("b", 2000)], "TECH", 20000, None, None)
    assert result.chairman_id == "a"
    assert result.director_id is None


def test_small_holder_is_neither():
    # 10% of 20000 issued
    result = calculate_leadership([player("a", 2000)], "TECH", 20000, None, None)
    assert result.chairman_id is None
    assert result.director_id is None


def test_director_excludes_chairman():
    ownership = calculate_ownership([player("a", 600), player("b", 300)], "TECH", 1000)
    chairman = determine_chairman(ownership, None)
    assert chairman == "a"
    assert determine_director(ownership, None, chairman) == "b"


def test_sitting_chairman_keeps_seat_on_tie():
    ownership = calculate_ownership([player("a", 500), player("b", 500)], "TECH", 1000)
    assert determine_chairman(ownership, "b") == "b"
    assert determine_chairman(ownership, None) == "a"


def test_thresholds_are_inclusive():
    ownership = calculate_ownership([player("a", 250)], "TECH", 1000)
    assert determine_chairman(ownership, None) is None
    assert determine_director(ownership, None, None) == "a"


def test_leadership_is_idempotent():
    players = [player("a", 700), player("b", 260)]
    first = calculate_leadership(players, "TECH", 1000, None, None)
    second = calculate_leadership(players, "TECH", 1000, first.chairman_id, first.director_id)
    assert first == second


def test_leader_lookups():
    stocks = [stock("TECH", "a", "b"), stock("BANK", None, "a"), stock("AUTO", "c")]
    assert is_player_leader("a", stocks)
    assert not is_player_leader("d", stocks)
    assert get_leadership_stocks("a", stocks) == ["TECH", "BANK"]
    assert collect_leader_ids(stocks) == ["a", "b", "c"]

import pytest

from stockgame.errors import GameStateError, InvariantViolationError, UnauthorizedError
from stockgame.services.round_processor import check_leaders_consistent
from conftest import buy, give_shares, make_event, set_events, stock_of


@pytest.fixture
def chairman_game(engine, solo_game):
    """Alice chairs TECH with three pending events in her hand."""
    alice = solo_game.players[0]
    give_shares(solo_game, 0, "TECH", 120000)
    set_events(
        solo_game,
        {
            alice.id: [
                make_event("e1", alice.id, 10, ["TECH"]),
                make_event("e2", alice.id, -20, ["TECH"]),
                make_event("e3", alice.id, 5, ["BANK"]),
            ]
        },
    )
    return solo_game


def end_round(engine, state):
    result, state = engine.end_turn(state)
    while not (result.round_ended or result.leadership_phase_required):
        result, state = engine.end_turn(state)
    return result, state


def test_round_end_opens_leadership_phase(engine, chairman_game):
    result, state = engine.end_turn(chairman_game)
    assert result.leadership_phase_required
    assert not result.round_ended
    leader = result.leaders[0]
    assert leader.player_id == state.players[0].id
    assert leader.stocks[0].symbol == "TECH"
    assert leader.stocks[0].leader_type == "chairman"
    assert leader.stocks[0].share_percentage == 60
    status = state.leadership_exclusion_status
    assert status.phase == "active"
    assert status.total_leaders == 1
    assert state.current_round == 1


def test_phase_blocks_trading_and_turns(engine, chairman_game):
    _, state = engine.end_turn(chairman_game)
    with pytest.raises(GameStateError):
        engine.end_turn(state)
    with pytest.raises(GameStateError):
        engine.execute_action(state, buy("TECH", 1))


def test_chairman_sees_every_event_on_the_stock(engine, chairman_game):
    _, state = engine.end_turn(chairman_game)
    opportunities = engine.get_exclusion_opportunities(state)
    assert len(opportunities) == 1
    tech = opportunities[0]
    assert tech.stock_symbol == "TECH"
    assert tech.can_exclude_from_all_players
    assert [e.id for e in tech.eligible_events] == ["e1", "e2"]


def test_one_exclusion_per_stock_then_finalize(engine, chairman_game):
    alice_id = chairman_game.players[0].id
    _, state = engine.end_turn(chairman_game)

    result, state = engine.exclude_event(state, alice_id, "e2")
    assert result.success
    assert result.message == "Alice (Chairman) excluded event: Event e2"

    result, unchanged = engine.exclude_event(state, alice_id, "e1")
    assert not result.success
    assert unchanged is state

    step, state = engine.next_leader(state)
    assert step.completed
    assert step.round_ended
    assert state.current_round == 2
    assert state.leadership_exclusion_status is None
    assert stock_of(state, "TECH").price == 120
    assert stock_of(state, "BANK").price == 125

    history = {e.id: e for e in state.event_history}
    assert history["e2"].excluded_by == alice_id
    assert history["e2"].price_diff is None
    assert history["e1"].price_diff["TECH"] == 10


def test_repeated_exclusion_is_a_no_op(engine, chairman_game):
    alice_id = chairman_game.players[0].id
    _, state = engine.end_turn(chairman_game)
    _, state = engine.exclude_event(state, alice_id, "e2")
    result, again = engine.exclude_event(state, alice_id, "e2")
    assert result.success
    assert again.leadership_exclusion_status.excluded_symbols == ["TECH"]
    assert len([a for a in again.players[0].action_history if a.action.type == "event_excluded"]) == 1


def test_chairman_cannot_exclude_unrelated_event(engine, chairman_game):
    alice_id = chairman_game.players[0].id
    _, state = engine.end_turn(chairman_game)
    with pytest.raises(UnauthorizedError):
        engine.exclude_event(state, alice_id, "e3")


def test_director_limited_to_own_hand(engine, duo_game):
    alice, bob = duo_game.players
    give_shares(duo_game, 0, "TECH", 60000)
    set_events(
        duo_game,
        {
            alice.id: [make_event("a1", alice.id, -10, ["TECH"])],
            bob.id: [make_event("b1", bob.id, -15, ["TECH"])],
        },
    )
    result, state = end_round(engine, duo_game)
    assert result.leadership_phase_required

    opportunity = engine.get_exclusion_opportunities(state)[0]
    assert opportunity.leader_type == "director"
    assert not opportunity.can_exclude_from_all_players
    assert [e.id for e in opportunity.eligible_events] == ["a1"]

    with pytest.raises(UnauthorizedError):
        engine.exclude_event(state, alice.id, "b1")
    result, state = engine.exclude_event(state, alice.id, "a1")
    assert result.success

    step, state = engine.complete_round(state)
    assert step.completed
    assert stock_of(state, "TECH").price == 95


def test_leaders_take_turns_in_stock_order(engine, duo_game):
    alice, bob = duo_game.players
    give_shares(duo_game, 0, "TECH", 120000)
    give_shares(duo_game, 1, "BANK", 120000)
    set_events(
        duo_game,
        {
            alice.id: [make_event("a1", alice.id, 10, ["BANK"])],
            bob.id: [make_event("b1", bob.id, -10, ["TECH"])],
        },
    )
    result, state = end_round(engine, duo_game)
    assert [leader.player_id for leader in result.leaders] == [alice.id, bob.id]

    groups = engine.get_leader_opportunity_groups(state)
    assert [(g.leader_id, g.is_current) for g in groups] == [(alice.id, True), (bob.id, False)]

    with pytest.raises(GameStateError):
        engine.exclude_event(state, bob.id, "a1")
    with pytest.raises(GameStateError):
        engine.complete_round(state)

    _, state = engine.exclude_event(state, alice.id, "b1")
    step, state = engine.next_leader(state)
    assert not step.completed
    assert step.next_leader_index == 1
    assert state.leadership_exclusion_status.completed_leader_ids == [alice.id]

    _, state = engine.exclude_event(state, bob.id, "a1")
    step, state = engine.complete_round(state)
    assert step.completed
    assert stock_of(state, "TECH").price == 110
    assert stock_of(state, "BANK").price == 120
    assert state.current_round == 2


def test_exclusion_outside_phase_is_rejected(engine, solo_game):
    with pytest.raises(GameStateError):
        engine.next_leader(solo_game)
    with pytest.raises(GameStateError):
        engine.get_leader_opportunity_groups(solo_game)


def test_stale_leader_list_is_an_invariant_violation(solo_game):
    with pytest.raises(InvariantViolationError):
        check_leaders_consistent(solo_game, ["someone"])

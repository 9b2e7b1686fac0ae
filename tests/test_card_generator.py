from stockgame.domain.game_rules import CARDS_PER_PLAYER, RARE_EVENT_IMPACT
from stockgame.domain.events import is_rare_event
from stockgame.services.card_generator import CardGenerator


def card_signature(hands):
    return [
        (
            [(e.type, e.title, e.impact, tuple(e.affected_stocks)) for e in events],
            [(ca.type, ca.title) for ca in corporate_actions],
        )
        for events, corporate_actions in hands.values()
    ]


def test_same_seed_deals_same_cards():
    first = CardGenerator(seed=99).deal_round(["p1", "p2"], 1)
    second = CardGenerator(seed=99).deal_round(["p1", "p2"], 1)
    assert card_signature(first) == card_signature(second)


def test_hand_composition():
    hands = CardGenerator(seed=5).deal_round(["p1", "p2", "p3"], 2)
    for player_id, (events, corporate_actions) in hands.items():
        assert len(events) == 9
        assert len(corporate_actions) == 1
        assert len(events) + len(corporate_actions) == CARDS_PER_PLAYER
        assert all(e.player_id == player_id and e.round == 2 for e in events)
        assert all(not ca.played for ca in corporate_actions)


def test_card_ids_are_unique():
    events, corporate_actions = CardGenerator(seed=5).deal_hand("p1", 1)
    ids = [e.id for e in events] + [ca.id for ca in corporate_actions]
    assert len(set(ids)) == len(ids)


def test_no_rare_events_before_round_three():
    generator = CardGenerator(seed=11)
    events = [generator.draw_event("p1", 2) for _ in range(500)]
    assert not any(is_rare_event(e.type) for e in events)


def test_rare_events_from_round_three():
    generator = CardGenerator(seed=11)
    rare = [e for e in (generator.draw_event("p1", 3) for _ in range(500)) if is_rare_event(e.type)]
    assert rare
    for event in rare:
        assert abs(event.impact) == RARE_EVENT_IMPACT
        assert event.severity == "extreme"
        assert event.affected_stocks


def test_corporate_action_details_match_type():
    generator = CardGenerator(seed=3)
    for _ in range(30):
        corporate_action = generator.draw_corporate_action("p1", 1)
        assert corporate_action.details.kind == corporate_action.type
        if corporate_action.type == "right_issue":
            assert (corporate_action.details.ratio, corporate_action.details.base_shares) == (1, 2)
            assert corporate_action.details.discount_percentage == 0.5
        elif corporate_action.type == "bonus_issue":
            assert (corporate_action.details.ratio, corporate_action.details.base_shares) == (1, 5)
        else:
            assert corporate_action.details.dividend_percentage == 0.05

"""Deals the per-round hands of event and corporate-action cards.

All randomness comes from one numpy Generator, so a fixed seed replays the
same hands (ids excepted, those are uuid7).
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from uuid6 import uuid7

from stockgame.domain.event_catalog import (
    BULL_RUN_TEMPLATE,
    CASH_EVENT_TEMPLATES,
    CRASH_TEMPLATE,
    EVENT_TEMPLATES,
)
from stockgame.domain.events import calculate_event_weight, compute_event_severity
from stockgame.domain.game_rules import (
    BONUS_ISSUE_RATIO,
    CARDS_PER_PLAYER,
    DIVIDEND_PERCENTAGE,
    RARE_EVENT_CHANCE,
    RARE_EVENT_IMPACT,
    RARE_EVENT_MIN_ROUND,
    RIGHT_ISSUE_DISCOUNT,
    RIGHT_ISSUE_RATIO,
    SECTORS,
    split_hand,
    symbols_for_sectors,
)
from stockgame.models.schema_models import (
    BonusIssueDetails,
    CorporateActionSchema,
    DividendDetails,
    MarketEventSchema,
    RightIssueDetails,
)

CORPORATE_ACTION_TYPES = ["dividend", "right_issue", "bonus_issue"]

Hand = Tuple[List[MarketEventSchema], List[CorporateActionSchema]]


class CardGenerator:
    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        """Card dealer backed by a numpy random Generator

        Args:
            seed (Optional[int]): Seed for a fresh Generator, ignored when rng is given
            rng (Optional[np.random.Generator]): Generator to draw from
        """
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng(seed)
        self.templates = EVENT_TEMPLATES + CASH_EVENT_TEMPLATES
        weights = np.array(
            [calculate_event_weight(compute_event_severity(t[5])) for t in self.templates],
            dtype=float,
        )
        self.probabilities: np.ndarray = weights / weights.sum()

    def deal_round(self, player_ids: Sequence[str], round_number: int) -> Dict[str, Hand]:
        """Deal one hand to every player for the given round

        Args:
            player_ids (Sequence[str]): Players in turn order
            round_number (int): Round the cards belong to

        Returns:
            Dict[str, Hand]: (events, corporate_actions) per player id
        """
        hands = {player_id: self.deal_hand(player_id, round_number) for player_id in player_ids}
        logging.debug(f"Dealt round {round_number} hands to {len(hands)} players")
        return hands

    def deal_hand(
        self, player_id: str, round_number: int, cards_per_player: int = CARDS_PER_PLAYER
    ) -> Hand:
        event_count, corporate_action_count = split_hand(cards_per_player)
        card_types = np.array(["event"] * event_count + ["corporate_action"] * corporate_action_count)
        self.rng.shuffle(card_types)

        events: List[MarketEventSchema] = []
        corporate_actions: List[CorporateActionSchema] = []
        for card_type in card_types:
            if card_type == "event":
                events.append(self.draw_event(player_id, round_number))
            else:
                corporate_actions.append(self.draw_corporate_action(player_id, round_number))
        return events, corporate_actions

    def draw_event(self, player_id: str, round_number: int) -> MarketEventSchema:
        rare_event = self._try_rare_event(player_id, round_number)
        if rare_event is not None:
            return rare_event

        index = int(self.rng.choice(len(self.templates), p=self.probabilities))
        _, event_type, title, description, sector, impact = self.templates[index]
        return MarketEventSchema(
            id=str(uuid7()),
            type=event_type,
            title=title,
            description=description,
            affected_stocks=symbols_for_sectors([sector]) if sector else [],
            impact=impact,
            round=round_number,
            player_id=player_id,
        )

    def _try_rare_event(self, player_id: str, round_number: int) -> Optional[MarketEventSchema]:
        if round_number < RARE_EVENT_MIN_ROUND:
            return None
        for template, impact in ((CRASH_TEMPLATE, -RARE_EVENT_IMPACT), (BULL_RUN_TEMPLATE, RARE_EVENT_IMPACT)):
            if self.rng.random() < RARE_EVENT_CHANCE:
                event_type, title, description = template
                sector = str(self.rng.choice(SECTORS))
                return MarketEventSchema(
                    id=str(uuid7()),
                    type=event_type,
                    title=title.format(sector_upper=sector.upper()),
                    description=description.format(sector=sector),
                    affected_stocks=symbols_for_sectors([sector]),
                    impact=impact,
                    round=round_number,
                    player_id=player_id,
                )
        return None

    def draw_corporate_action(self, player_id: str, round_number: int) -> CorporateActionSchema:
        action_type = str(self.rng.choice(CORPORATE_ACTION_TYPES))

        if action_type == "dividend":
            title = "Declare Dividend"
            description = (
                "Announce dividend payout to shareholders of selected stock "
                f"({DIVIDEND_PERCENTAGE * 100:.0f}% of stock price)"
            )
            details = DividendDetails(dividend_percentage=DIVIDEND_PERCENTAGE)
        elif action_type == "right_issue":
            ratio, base_shares = RIGHT_ISSUE_RATIO
            title = "Announce Right Issue"
            description = (
                "Offer new shares to existing shareholders at "
                f"{(1 - RIGHT_ISSUE_DISCOUNT) * 100:.0f}% discount ({ratio}:{base_shares} ratio)"
            )
            details = RightIssueDetails(
                ratio=ratio, base_shares=base_shares, discount_percentage=RIGHT_ISSUE_DISCOUNT
            )
        else:
            ratio, base_shares = BONUS_ISSUE_RATIO
            title = "Announce Bonus Issue"
            description = f"Issue bonus shares to existing shareholders ({ratio}:{base_shares} ratio)"
            details = BonusIssueDetails(ratio=ratio, base_shares=base_shares)

        return CorporateActionSchema(
            id=str(uuid7()),
            type=action_type,
            title=title,
            description=description,
            details=details,
            round=round_number,
            player_id=player_id,
        )

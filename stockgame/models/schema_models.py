from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

from stockgame.domain.events import compute_event_severity

EventType = Literal["positive", "negative", "neutral", "crash", "bull_run", "inflation", "deflation"]
Severity = Literal["low", "medium", "high", "extreme"]
CorporateActionType = Literal["dividend", "right_issue", "bonus_issue"]
RightIssueStatus = Literal["pending", "active", "expired"]
ActionType = Literal[
    "buy",
    "sell",
    "skip",
    "play_corporate_action",
    "exercise_right_issue",
    "dividend_declared",
    "dividend_received",
    "bonus_issue_declared",
    "bonus_received",
    "right_issue_declared",
    "right_issue_purchased",
    "deflation_gain",
    "inflation_loss",
    "event_excluded",
]


class CamelSchema(BaseModel):
    """Base for every persisted/transmitted model: camelCase on the wire, snake_case in code."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class PriceHistoryEntry(CamelSchema):
    round: int
    price: float


class StockSchema(CamelSchema):
    symbol: str
    name: str
    sector: str
    price: float
    available_quantity: int
    total_quantity: int
    director_id: Optional[str] = None
    chairman_id: Optional[str] = None
    price_history: List[PriceHistoryEntry] = []


class StockHoldingSchema(CamelSchema):
    symbol: str
    quantity: int
    average_cost: float


class TradeActionSchema(CamelSchema):
    type: ActionType
    symbol: Optional[str] = None
    quantity: Optional[int] = None
    corporate_action_id: Optional[str] = None
    event_id: Optional[str] = None


class TurnActionSchema(CamelSchema):
    round: int
    turn: int
    action: TradeActionSchema
    price: Optional[float] = None
    total_value: Optional[float] = None
    result: str
    timestamp: int


class MarketEventSchema(CamelSchema):
    id: str
    type: EventType
    severity: Optional[Severity] = None
    title: str
    description: str
    affected_stocks: List[str] = []
    impact: float
    round: int
    player_id: str
    excluded_by: Optional[str] = None
    price_diff: Optional[Dict[str, float]] = None
    actual_impact: Optional[Dict[str, float]] = None

    @model_validator(mode="after")
    def derive_severity(self):
        # Severity always follows the impact, whatever the caller sent.
        self.severity = compute_event_severity(self.impact)
        return self


class DividendDetails(CamelSchema):
    kind: Literal["dividend"] = "dividend"
    dividend_percentage: float


class RightIssueDetails(CamelSchema):
    kind: Literal["right_issue"] = "right_issue"
    ratio: int
    base_shares: int
    discount_percentage: float


class BonusIssueDetails(CamelSchema):
    kind: Literal["bonus_issue"] = "bonus_issue"
    ratio: int
    base_shares: int


CorporateActionDetails = Union[DividendDetails, RightIssueDetails, BonusIssueDetails]


class CorporateActionSchema(CamelSchema):
    id: str
    type: CorporateActionType
    symbol: Optional[str] = None
    title: str
    description: str
    details: CorporateActionDetails = Field(discriminator="kind")
    round: int
    player_id: str
    players_processed: List[str] = []
    played: bool = False
    status: Optional[RightIssueStatus] = None
    expires_at_player_id: Optional[str] = None
    eligible_player_ids: Optional[List[str]] = None


class PlayerSchema(CamelSchema):
    id: str
    name: str
    cash: float
    portfolio: List[StockHoldingSchema] = []
    action_history: List[TurnActionSchema] = []
    events: List[MarketEventSchema] = []
    corporate_actions: List[CorporateActionSchema] = []


class LeadershipExclusionStatusSchema(CamelSchema):
    phase: Literal["active", "completed"] = "active"
    leader_ids: List[str]
    current_leader_index: int = 0
    total_leaders: int
    completed_leader_ids: List[str] = []
    # symbols the current leader already used for an exclusion in this leader-turn
    excluded_symbols: List[str] = []


class GameStateSchema(CamelSchema):
    id: str
    current_round: int = 1
    max_rounds: int
    current_turn_in_round: int = 1
    turns_per_round: int
    current_player_index: int = 0
    is_complete: bool = False
    players: List[PlayerSchema]
    stocks: List[StockSchema]
    event_history: List[MarketEventSchema] = []
    corporate_action_history: List[CorporateActionSchema] = []
    leadership_exclusion_status: Optional[LeadershipExclusionStatusSchema] = None

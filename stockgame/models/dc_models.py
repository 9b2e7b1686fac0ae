from typing import List, Literal, Optional

from stockgame.domain.game_rules import DEFAULT_MAX_ROUNDS, DEFAULT_TURNS_PER_ROUND
from stockgame.models.schema_models import (
    CamelSchema,
    CorporateActionSchema,
    MarketEventSchema,
)

RequestActionType = Literal["buy", "sell", "skip", "play_corporate_action", "exercise_right_issue"]
LeaderType = Literal["chairman", "director"]


class CreateGameModel(CamelSchema):
    player_names: List[str]
    max_rounds: int = DEFAULT_MAX_ROUNDS
    turns_per_round: int = DEFAULT_TURNS_PER_ROUND


class GameCreatedModel(CamelSchema):
    game_id: str


class ActionRequestModel(CamelSchema):
    type: RequestActionType
    symbol: Optional[str] = None
    quantity: Optional[int] = None
    corporate_action_id: Optional[str] = None
    player_id: Optional[str] = None


class ToastModel(CamelSchema):
    player_name: str
    message: str


class ActionResultModel(CamelSchema):
    success: bool
    message: str
    toasts: Optional[List[ToastModel]] = None


class LeaderStockModel(CamelSchema):
    symbol: str
    name: str
    leader_type: LeaderType
    share_percentage: float


class LeaderInfoModel(CamelSchema):
    player_id: str
    player_name: str
    stocks: List[LeaderStockModel] = []


class TurnResultModel(CamelSchema):
    round_ended: bool = False
    game_over: bool = False
    leadership_phase_required: bool = False
    leaders: List[LeaderInfoModel] = []


class ExclusionOpportunityModel(CamelSchema):
    stock_symbol: str
    stock_name: str
    leader_id: str
    leader_name: str
    leader_type: LeaderType
    can_exclude_from_all_players: bool
    eligible_events: List[MarketEventSchema] = []


class LeaderOpportunityGroupModel(CamelSchema):
    leader_id: str
    leader_name: str
    leader_index: int
    total_leaders: int
    is_current: bool = False
    opportunities: List[ExclusionOpportunityModel] = []


class ExcludeEventModel(CamelSchema):
    leader_id: str
    event_id: str
    symbol: Optional[str] = None


class LeadershipStepModel(CamelSchema):
    """Outcome of advancing the exclusion phase."""

    completed: bool
    next_leader_index: Optional[int] = None
    round_ended: bool = False
    game_over: bool = False


class HoldingModel(CamelSchema):
    symbol: str
    name: str
    quantity: int
    average_cost: float
    current_price: float
    total_value: float
    profit_loss: float
    profit_loss_percent: float


class PortfolioModel(CamelSchema):
    player_id: str
    player_name: str
    cash: float
    holdings: List[HoldingModel] = []
    total_value: float


class TradeValidationModel(CamelSchema):
    is_valid: bool
    error: Optional[str] = None
    max_quantity: int = 0
    total_cost: float = 0.0


class RankingModel(CamelSchema):
    rank: int
    player_id: str
    player_name: str
    cash: float
    portfolio_value: float
    net_worth: float


class RightsIssueOfferModel(CamelSchema):
    corporate_action: CorporateActionSchema
    symbol: str
    entitlement: int
    price: float
    already_exercised: bool


class CorporateActionPreviewModel(CamelSchema):
    is_valid: bool
    error: Optional[str] = None
    corporate_action_id: str
    type: str
    symbol: str
    stock_price: float
    current_holdings: int = 0
    # dividend
    dividend_per_share: Optional[float] = None
    total_dividend: Optional[float] = None
    dividend_percent: Optional[float] = None
    # rights issue
    price_per_share: Optional[float] = None
    discount_percent: Optional[float] = None
    max_by_holdings: Optional[int] = None
    max_by_market: Optional[int] = None
    max_by_cash: Optional[int] = None
    max_allowed: Optional[int] = None
    # bonus issue
    bonus_shares: Optional[int] = None
    new_total_shares: Optional[int] = None
    ratio: Optional[int] = None
    base_shares: Optional[int] = None

"""Corporate action arithmetic: dividends, bonus issues and rights issues.

Inputs are shareholder snapshots; the results describe what each holder
receives. Nothing here mutates the snapshot it is given.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from stockgame.domain.game_rules import DIVIDEND_PERCENTAGE, MAX_STOCK_QUANTITY
from stockgame.domain.pricing import round_currency


@dataclass(frozen=True)
class ShareholderHolding:
    player_id: str
    player_name: str
    quantity: int
    average_cost: float


@dataclass(frozen=True)
class DividendCalculation:
    player_id: str
    player_name: str
    symbol: str
    quantity: int
    dividend_amount: float


@dataclass(frozen=True)
class BonusIssueCalculation:
    player_id: str
    player_name: str
    symbol: str
    original_quantity: int
    bonus_shares: int
    new_quantity: int
    new_average_cost: float


@dataclass(frozen=True)
class BonusIssueDistributionResult:
    distributions: List[BonusIssueCalculation] = field(default_factory=list)
    total_bonus_shares: int = 0
    current_issued_quantity: int = 0
    max_stock_quantity: int = MAX_STOCK_QUANTITY
    would_exceed_limit: bool = False


def calculate_dividend_distribution(
    price: float,
    shareholders: Sequence[ShareholderHolding],
    symbol: str,
    dividend_percentage: float = DIVIDEND_PERCENTAGE,
) -> List[DividendCalculation]:
    """Dividend owed to every holder of a stock.

    Args:
        price (float): Current stock price
        shareholders (Sequence[ShareholderHolding]): Holders of the stock
        symbol (str): Stock symbol
        dividend_percentage (float, optional): Payout per share as a fraction of price

    Returns:
        List[DividendCalculation]: One entry per holder with a positive quantity
    """
    dividend_per_share = price * dividend_percentage
    return [
        DividendCalculation(
            player_id=holder.player_id,
            player_name=holder.player_name,
            symbol=symbol,
            quantity=holder.quantity,
            dividend_amount=round_currency(holder.quantity * dividend_per_share),
        )
        for holder in shareholders
        if holder.quantity > 0
    ]


def calculate_bonus_issue_distribution(
    shareholders: Sequence[ShareholderHolding],
    symbol: str,
    ratio: int,
    base_shares: int,
    max_stock_quantity: int = MAX_STOCK_QUANTITY,
) -> BonusIssueDistributionResult:
    """Bonus shares per holder, scaled down proportionally under the supply cap.

    Every holder receives floor(quantity / base_shares) * ratio shares. When
    the issued quantity plus the intended bonus would pass the cap, each
    holder's bonus is multiplied by available / intended and floored on its
    own. Whatever the flooring leaves unallocated stays unallocated.

    Args:
        shareholders (Sequence[ShareholderHolding]): Holders of the stock
        symbol (str): Stock symbol
        ratio (int): Bonus shares granted per block
        base_shares (int): Block size in held shares
        max_stock_quantity (int, optional): Supply cap for the stock

    Returns:
        BonusIssueDistributionResult: Distributions and cap information
    """
    current_issued_quantity = sum(h.quantity for h in shareholders if h.quantity > 0)

    intended = []
    for holder in shareholders:
        if holder.quantity <= 0:
            continue
        bonus = (holder.quantity // base_shares) * ratio
        if bonus > 0:
            intended.append((holder, bonus))

    total_intended_bonus = sum(bonus for _, bonus in intended)
    would_exceed_limit = current_issued_quantity + total_intended_bonus > max_stock_quantity
    available_shares = max(0, max_stock_quantity - current_issued_quantity)

    scaling_factor = 1.0
    if would_exceed_limit and total_intended_bonus > 0:
        scaling_factor = available_shares / total_intended_bonus

    distributions = []
    for holder, bonus in intended:
        actual_bonus = math.floor(bonus * scaling_factor) if would_exceed_limit else bonus
        new_quantity = holder.quantity + actual_bonus
        distributions.append(
            BonusIssueCalculation(
                player_id=holder.player_id,
                player_name=holder.player_name,
                symbol=symbol,
                original_quantity=holder.quantity,
                bonus_shares=actual_bonus,
                new_quantity=new_quantity,
                new_average_cost=round_currency(
                    holder.average_cost * holder.quantity / new_quantity
                ),
            )
        )

    return BonusIssueDistributionResult(
        distributions=distributions,
        total_bonus_shares=sum(d.bonus_shares for d in distributions),
        current_issued_quantity=current_issued_quantity,
        max_stock_quantity=max_stock_quantity,
        would_exceed_limit=would_exceed_limit,
    )


def calculate_right_issue_entitlement(quantity: int, ratio: int, base_shares: int) -> int:
    """Shares a holder may buy in a rights issue: floor(quantity / base) * ratio."""
    if quantity <= 0 or base_shares <= 0:
        return 0
    return (quantity // base_shares) * ratio


def calculate_right_issue_price(price: float, discount_percentage: float) -> float:
    # discount_percentage is the fraction of market price paid, 0.5 means half price
    return round_currency(price * discount_percentage)

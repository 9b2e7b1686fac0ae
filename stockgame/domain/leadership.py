"""Chairman/director determination from share ownership.

Ties at the top keep the sitting leader so that leadership does not flicker
between equally weighted holders from one turn to the next.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from stockgame.domain.game_rules import CHAIRMAN_THRESHOLD, DIRECTOR_THRESHOLD


@dataclass(frozen=True)
class OwnershipData:
    player_id: str
    quantity: int
    percentage: float


@dataclass(frozen=True)
class LeadershipResult:
    chairman_id: Optional[str]
    director_id: Optional[str]


def _holding_quantity(player, symbol: str) -> int:
    for holding in player.portfolio:
        if holding.symbol == symbol:
            return holding.quantity
    return 0


def calculate_ownership(players: Iterable, symbol: str, total_issued: int) -> List[OwnershipData]:
    """Ownership share of every player for one stock.

    Args:
        players (Iterable): Objects with id and portfolio (symbol, quantity holdings)
        symbol (str): Stock symbol
        total_issued (int): Issued share count the percentage is taken against

    Returns:
        List[OwnershipData]: Sorted by quantity descending, ties in input order
    """
    ownership = []
    for player in players:
        quantity = _holding_quantity(player, symbol)
        percentage = quantity / total_issued * 100 if total_issued > 0 else 0.0
        ownership.append(OwnershipData(player.id, quantity, percentage))
    # sorted() is stable, so equal quantities keep input order
    return sorted(ownership, key=lambda o: o.quantity, reverse=True)


def _pick_leader(qualifying: Sequence[OwnershipData], current_id: Optional[str]) -> Optional[str]:
    if not qualifying:
        return None
    highest = max(o.quantity for o in qualifying)
    tied = [o for o in qualifying if o.quantity == highest]
    if current_id is not None and any(o.player_id == current_id for o in tied):
        return current_id
    return tied[0].player_id


def determine_chairman(
    ownership: Sequence[OwnershipData],
    current_chairman_id: Optional[str],
    threshold: float = CHAIRMAN_THRESHOLD,
) -> Optional[str]:
    """Largest holder at or above the chairman threshold; sitting chairman wins ties."""
    qualifying = [o for o in ownership if o.percentage >= threshold * 100]
    return _pick_leader(qualifying, current_chairman_id)


def determine_director(
    ownership: Sequence[OwnershipData],
    current_director_id: Optional[str],
    chairman_id: Optional[str],
    threshold: float = DIRECTOR_THRESHOLD,
) -> Optional[str]:
    """Largest non-chairman holder at or above the director threshold."""
    qualifying = [
        o
        for o in ownership
        if o.percentage >= threshold * 100 and o.player_id != chairman_id
    ]
    return _pick_leader(qualifying, current_director_id)


def calculate_leadership(
    players: Iterable,
    symbol: str,
    total_issued: int,
    current_chairman_id: Optional[str],
    current_director_id: Optional[str],
    chairman_threshold: float = CHAIRMAN_THRESHOLD,
    director_threshold: float = DIRECTOR_THRESHOLD,
) -> LeadershipResult:
    ownership = calculate_ownership(players, symbol, total_issued)
    chairman_id = determine_chairman(ownership, current_chairman_id, chairman_threshold)
    director_id = determine_director(
        ownership, current_director_id, chairman_id, director_threshold
    )
    return LeadershipResult(chairman_id=chairman_id, director_id=director_id)


def is_player_leader(player_id: str, stocks: Iterable) -> bool:
    return any(
        stock.chairman_id == player_id or stock.director_id == player_id for stock in stocks
    )


def get_leadership_stocks(player_id: str, stocks: Iterable) -> List[str]:
    """Symbols of the stocks the player chairs or directs."""
    return [
        stock.symbol
        for stock in stocks
        if stock.chairman_id == player_id or stock.director_id == player_id
    ]


def collect_leader_ids(stocks: Iterable) -> List[str]:
    """Distinct chairman/director ids, first-seen in stock order (chairman before director)."""
    leader_ids: List[str] = []
    for stock in stocks:
        for leader_id in (stock.chairman_id, stock.director_id):
            if leader_id is not None and leader_id not in leader_ids:
                leader_ids.append(leader_id)
    return leader_ids

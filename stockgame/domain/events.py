"""Market event classification helpers."""

from typing import Iterable

from stockgame.domain.pricing import (
    SEVERITY_EXTREME,
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    classify_severity,
)

RARE_EVENT_TYPES = ("crash", "bull_run")
CASH_EVENT_TYPES = ("inflation", "deflation")

EVENT_WEIGHTS = {
    SEVERITY_LOW: 5,
    SEVERITY_MEDIUM: 3,
    SEVERITY_HIGH: 1,
    SEVERITY_EXTREME: 1,
}


def compute_event_severity(impact: float) -> str:
    return classify_severity(impact)


def is_rare_event(event_type: str) -> bool:
    return event_type in RARE_EVENT_TYPES


def is_cash_event(event_type: str) -> bool:
    """Inflation/deflation events move every player's cash instead of a price."""
    return event_type in CASH_EVENT_TYPES


def does_event_affect_stock(affected_stocks: Iterable[str], symbol: str) -> bool:
    return symbol in affected_stocks


def calculate_event_weight(severity: str) -> int:
    """Draw weight for an event of the given severity, lower severities are more common."""
    return EVENT_WEIGHTS[severity]

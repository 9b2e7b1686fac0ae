"""Game rules and constants that are independent from HTTP and DB.

This module is organized by *concept* (rules), not by service.

Rule of thumb:
- OK: constants, lookups, pure transformations.
- Not OK: touching DB sessions, Redis, FastAPI, datetime.now(), etc.
"""

DEFAULT_MAX_ROUNDS = 10
DEFAULT_TURNS_PER_ROUND = 3
STARTING_CASH = 10000.0
MIN_PLAYERS = 1
MAX_PLAYERS = 4

MAX_STOCK_QUANTITY = 200000
MIN_STOCK_PRICE = 0.0

CARDS_PER_PLAYER = 10
CORPORATE_ACTION_PERCENTAGE = 0.1  # 10% of cards are corporate actions

CHAIRMAN_THRESHOLD = 0.5
DIRECTOR_THRESHOLD = 0.25

DIVIDEND_PERCENTAGE = 0.05  # 5% of stock price per share
RIGHT_ISSUE_DISCOUNT = 0.5  # pay 50% of market price
RIGHT_ISSUE_RATIO = (1, 2)  # 1 new share for every 2 held
BONUS_ISSUE_RATIO = (1, 5)  # 1 bonus share for every 5 held

# Rare events are not dealt before this round.
RARE_EVENT_MIN_ROUND = 3
RARE_EVENT_CHANCE = 0.05
RARE_EVENT_IMPACT = 35

INITIAL_STOCKS = [
    {"symbol": "TECH", "name": "TechCorp", "sector": "Technology", "price": 110.0},
    {"symbol": "BANK", "name": "BankGroup", "sector": "Finance", "price": 120.0},
    {"symbol": "ENRG", "name": "EnergyPlus", "sector": "Energy", "price": 70.0},
    {"symbol": "HLTH", "name": "HealthMed", "sector": "Healthcare", "price": 90.0},
    {"symbol": "FOOD", "name": "FoodChain", "sector": "Consumer", "price": 80.0},
    {"symbol": "AUTO", "name": "AutoDrive", "sector": "Automotive", "price": 60.0},
]

SECTORS = [stock["sector"] for stock in INITIAL_STOCKS]


def symbols_for_sectors(sectors: list[str]) -> list[str]:
    """Return the stock symbols that belong to the given sectors, in listing order."""
    return [stock["symbol"] for stock in INITIAL_STOCKS if stock["sector"] in sectors]


def split_hand(cards_per_player: int = CARDS_PER_PLAYER) -> tuple[int, int]:
    """Return (event_count, corporate_action_count) for one player's hand."""
    corporate_actions = int(cards_per_player * CORPORATE_ACTION_PERCENTAGE)
    return cards_per_player - corporate_actions, corporate_actions

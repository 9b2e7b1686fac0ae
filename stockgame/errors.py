"""Error taxonomy of the game service.

Validation failures of a player action are not errors: they come back as an
unsuccessful ActionResult. Everything below is raised before any state is
saved, and the router turns it into an HTTPException with its status code.
"""

from typing import Any, Optional

from fastapi import status


class GameError(Exception):
    code = "GAME_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(GameError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(GameError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class GameStateError(GameError):
    """Request does not fit the game's current phase (out of turn, wrong phase, game over)."""

    code = "GAME_STATE_ERROR"
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(GameError):
    """Player lacks the leadership rights the request needs."""

    code = "UNAUTHORIZED"
    status_code = status.HTTP_403_FORBIDDEN


class InvariantViolationError(GameError):
    """Engine defect. The transition is aborted and nothing is persisted."""

    code = "INVARIANT_VIOLATION"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def game_not_found(game_id: str) -> NotFoundError:
    return NotFoundError(f"Game {game_id} not found", {"gameId": game_id})


def game_complete() -> GameStateError:
    return GameStateError("Game is already complete")


def leadership_phase_active() -> GameStateError:
    return GameStateError("Leadership exclusion phase is active")


def leadership_phase_not_active() -> GameStateError:
    return GameStateError("Leadership exclusion phase is not active")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from stockgame.game_lock_manager import GameLockManager
from stockgame.routers.game import game_router, get_game_service
from stockgame.services.game_service import GameService
from stockgame.services.game_store import InMemoryGameStore


@pytest.fixture
def client(engine):
    service = GameService(InMemoryGameStore(), engine, GameLockManager())
    app = FastAPI()
    app.include_router(game_router)
    app.dependency_overrides[get_game_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def game_id(client):
    response = client.post(
        "/games", json={"playerNames": ["Alice", "Bob"], "maxRounds": 2, "turnsPerRound": 1}
    )
    assert response.status_code == 201
    return response.json()["gameId"]


def test_get_game_uses_camel_case(client, game_id):
    body = client.get(f"/games/{game_id}").json()
    assert body["id"] == game_id
    assert body["currentRound"] == 1
    assert body["turnsPerRound"] == 1
    assert body["stocks"][0]["availableQuantity"] == 200000
    assert body["leadershipExclusionStatus"] is None


def test_invalid_game_setup(client):
    response = client.post("/games", json={"playerNames": ["a", "b", "c", "d", "e"]})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_unknown_game_is_404(client):
    response = client.get("/games/missing")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "NOT_FOUND"


def test_buy_action(client, game_id):
    response = client.post(
        f"/games/{game_id}/actions", json={"type": "buy", "symbol": "TECH", "quantity": 10}
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    portfolio = client.get(f"/games/{game_id}/portfolio").json()
    assert portfolio["playerName"] == "Alice"
    assert portfolio["cash"] == 8900
    assert portfolio["holdings"][0]["quantity"] == 10


def test_failed_action_is_a_200_with_success_false(client, game_id):
    response = client.post(
        f"/games/{game_id}/actions", json={"type": "sell", "symbol": "TECH", "quantity": 1}
    )
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "You do not own any shares of this stock",
        "toasts": None,
    }


def test_out_of_turn_action_is_409(client, game_id):
    bob_id = client.get(f"/games/{game_id}").json()["players"][1]["id"]
    response = client.post(
        f"/games/{game_id}/actions", json={"type": "skip", "playerId": bob_id}
    )
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "GAME_STATE_ERROR"


def test_end_turn(client, game_id):
    body = client.post(f"/games/{game_id}/end-turn").json()
    assert body["roundEnded"] is False
    assert client.get(f"/games/{game_id}").json()["currentPlayerIndex"] == 1


def test_leadership_outside_phase_is_409(client, game_id):
    assert client.get(f"/games/{game_id}/leadership").status_code == 409
    assert client.post(f"/games/{game_id}/leadership/next").status_code == 409


def test_query_endpoints(client, game_id):
    check = client.get(
        f"/games/{game_id}/validate-trade", params={"type": "buy", "symbol": "TECH"}
    ).json()
    assert check["isValid"] is True
    assert check["maxQuantity"] == 90

    rankings = client.get(f"/games/{game_id}/rankings").json()
    assert [r["rank"] for r in rankings] == [1, 2]

    cards = client.get(f"/games/{game_id}/corporate-actions").json()
    assert len(cards) == 1
    assert client.get(f"/games/{game_id}/rights-issues").json() == []

    preview = client.get(
        f"/games/{game_id}/corporate-actions/{cards[0]['id']}/preview", params={"symbol": "TECH"}
    )
    assert preview.status_code == 200
    assert preview.json()["currentHoldings"] == 0


def test_stream_needs_redis(client, game_id):
    assert client.get(f"/games/{game_id}/stream").status_code == 503

import asyncio
from datetime import datetime, timedelta

import pytest

from stockgame.errors import GameStateError, NotFoundError
from stockgame.game_lock_manager import GameLockManager
from stockgame.services.game_service import GameService
from stockgame.services.game_store import InMemoryGameStore
from conftest import buy


class FakeRedis:
    def __init__(self):
        self.published = []

    async def publish(self, channel, message):
        self.published.append((channel, message))


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.fixture
def service(engine, redis):
    return GameService(InMemoryGameStore(), engine, GameLockManager(), redis)


async def test_create_and_load(service):
    created = await service.create_game(["Alice", "Bob"], 3, 2)
    loaded = await service.get_game_state(created.id)
    assert loaded.model_dump() == created.model_dump()
    assert loaded is not created


async def test_unknown_game(service):
    with pytest.raises(NotFoundError):
        await service.get_game_state("missing")


async def test_successful_action_is_saved_and_published(service, redis):
    game = await service.create_game(["Alice"], 2, 1)
    result = await service.execute_action(game.id, buy("TECH", 10))
    assert result.success
    state = await service.get_game_state(game.id)
    assert state.players[0].cash == 8900
    assert redis.published == [(f"game:{game.id}", game.id)]


async def test_failed_action_is_not_saved(service, redis):
    game = await service.create_game(["Alice"], 2, 1)
    result = await service.execute_action(game.id, buy("TECH", 100000))
    assert not result.success
    assert (await service.get_game_state(game.id)).model_dump() == game.model_dump()
    assert redis.published == []


async def test_raised_error_leaves_store_untouched(service):
    game = await service.create_game(["Alice", "Bob"], 2, 1)
    bob_id = game.players[1].id
    with pytest.raises(GameStateError):
        await service.execute_action(game.id, buy("TECH", 1, player_id=bob_id))
    assert (await service.get_game_state(game.id)).model_dump() == game.model_dump()


async def test_concurrent_actions_are_serialized(service):
    game = await service.create_game(["Alice"], 2, 1)
    results = await asyncio.gather(*(service.execute_action(game.id, buy("AUTO", 10)) for _ in range(5)))
    assert all(r.success for r in results)
    state = await service.get_game_state(game.id)
    assert state.players[0].portfolio[0].quantity == 50
    assert state.players[0].cash == 7000


async def test_end_turn_through_game_over(service):
    game = await service.create_game(["Alice"], 1, 2)
    assert not (await service.end_turn(game.id)).round_ended
    result = await service.end_turn(game.id)
    assert result.game_over
    assert (await service.get_game_state(game.id)).is_complete
    assert len(await service.get_rankings(game.id)) == 1


async def test_purge_completed_games(service):
    finished = await service.create_game(["Alice"], 1, 1)
    await service.end_turn(finished.id)
    running = await service.create_game(["Bob"], 1, 1)
    await service.lock_manager.get_lock(running.id)

    document, _ = service.store.games[finished.id]
    service.store.games[finished.id] = (document, datetime.now() - timedelta(hours=48))

    purged = await service.purge_completed_games(24)
    assert purged == [finished.id]
    assert finished.id not in service.store.games
    assert running.id in service.store.games
    assert await service.lock_manager.lock_count() == 1


async def test_lock_manager_reuses_locks():
    manager = GameLockManager()
    first = await manager.get_lock("g1")
    assert await manager.get_lock("g1") is first
    assert await manager.get_lock("g2") is not first
    await manager.cleanup("g1")
    assert await manager.get_lock("g1") is not first

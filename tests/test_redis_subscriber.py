import json

from stockgame.redis_subscriber import RedisSubscriber
from stockgame.services.game_store import InMemoryGameStore


class FakePubSub:
    def __init__(self, calls):
        self.calls = calls

    async def subscribe(self, channel):
        self.calls.append(("subscribe", channel))

    async def get_message(self, ignore_subscribe_messages=False, timeout=None):
        return {"type": "message", "data": "ignored"}

    async def unsubscribe(self, channel):
        self.calls.append(("unsubscribe", channel))

    async def close(self):
        self.calls.append(("close",))


class FakeRedis:
    def __init__(self, calls):
        self.calls = calls

    def pubsub(self):
        return FakePubSub(self.calls)


class RecordingStore(InMemoryGameStore):
    def __init__(self, calls):
        super().__init__()
        self.calls = calls

    async def load(self, game_id):
        self.calls.append(("load", game_id))
        return await super().load(game_id)


async def test_subscribes_before_sending_current_state(solo_game):
    calls = []
    store = RecordingStore(calls)
    await store.create(solo_game)
    channel = f"game:{solo_game.id}"
    generator = RedisSubscriber(store, solo_game.id).event_generator(channel, FakeRedis(calls))

    first = await generator.__anext__()
    assert calls == [("subscribe", channel), ("load", solo_game.id)]
    assert first.startswith("event: latest_state_update\ndata: ")
    assert json.loads(first.split("data: ", 1)[1])["id"] == solo_game.id

    second = await generator.__anext__()
    assert second.startswith("event: latest_state_update")

    await generator.aclose()
    assert calls[-2:] == [("unsubscribe", channel), ("close",)]

import logging
from typing import AsyncGenerator

from redis.asyncio import Redis

from stockgame.converter import DataConverter
from stockgame.services.game_store import GameStore

data_converter = DataConverter()


class RedisSubscriber:
    """Redis subscriber class to handle SSE events."""

    def __init__(self, store: GameStore, game_id: str):
        """Initialize RedisSubscriber with the game store and game_id."""
        self.store: GameStore = store
        self.game_id: str = game_id

    async def latest_state_message(self) -> str:
        state = await self.store.load(self.game_id)
        payload = data_converter.convert_gamestate_to_payload(state)
        logging.debug(f"Payload: {payload}")
        return f"event: latest_state_update\ndata: {payload}\n\n"

    async def event_generator(self, channel: str, redis: Redis) -> AsyncGenerator[str, None]:
        """Event generator to handle SSE events.

        Args:
            channel (str): To receive messages from Redis, the channel name is game:{game_id}.
            redis (Redis): Redis connection object.
        """
        pubsub = redis.pubsub()
        await pubsub.subscribe(channel)
        try:
            # subscribed first, so a change committed meanwhile still produces a message
            yield await self.latest_state_message()
            while True:
                msg = await pubsub.get_message(ignore_subscribe_messages=True, timeout=None)
                if msg and msg["type"] == "message":
                    yield await self.latest_state_message()
        finally:
            logging.info("Unsubscribing from channel")
            if pubsub:
                await pubsub.unsubscribe(channel)
                await pubsub.close()

"""Persistence of game states.

- The service layer only talks to a GameStore; it never opens DB sessions.
- SqlGameStore owns session boundaries and goes through the CRUD helpers.
- Stored states are camelCase JSON documents.
"""

from datetime import datetime
from typing import Dict, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from stockgame.converter import DataConverter
from stockgame.crud import CollectID, CreateData, DeleteData, ReadData, UpdateData
from stockgame.errors import game_not_found
from stockgame.models.schema_models import GameStateSchema

data_converter = DataConverter()


class GameStore:
    """Storage contract used by GameService."""

    async def load(self, game_id: str) -> GameStateSchema:
        raise NotImplementedError

    async def save(self, game_id: str, state: GameStateSchema) -> None:
        raise NotImplementedError

    async def create(self, state: GameStateSchema) -> None:
        raise NotImplementedError

    async def delete(self, game_id: str) -> None:
        raise NotImplementedError

    async def list_completed_before(self, cutoff: datetime) -> List[str]:
        raise NotImplementedError


class InMemoryGameStore(GameStore):
    """Single-process store keeping serialized documents, so loads never share objects."""

    def __init__(self):
        self.games: Dict[str, Tuple[dict, datetime]] = {}

    async def load(self, game_id: str) -> GameStateSchema:
        if game_id not in self.games:
            raise game_not_found(game_id)
        document, _ = self.games[game_id]
        return data_converter.convert_document_to_gamestate(document)

    async def save(self, game_id: str, state: GameStateSchema) -> None:
        if game_id not in self.games:
            raise game_not_found(game_id)
        self.games[game_id] = (data_converter.convert_gamestate_to_document(state), datetime.now())

    async def create(self, state: GameStateSchema) -> None:
        self.games[state.id] = (data_converter.convert_gamestate_to_document(state), datetime.now())

    async def delete(self, game_id: str) -> None:
        self.games.pop(game_id, None)

    async def list_completed_before(self, cutoff: datetime) -> List[str]:
        return [
            game_id
            for game_id, (document, updated_at) in self.games.items()
            if document["isComplete"] and updated_at < cutoff
        ]


class SqlGameStore(GameStore):
    def __init__(self, Session: async_sessionmaker):
        self.Session: async_sessionmaker = Session

    async def load(self, game_id: str) -> GameStateSchema:
        async with self.Session() as session:
            try:
                document = await ReadData.read_game_state(game_id, session)
            except SQLAlchemyError as e:
                raise RuntimeError("Failed to read game data") from e
        if document is None:
            raise game_not_found(game_id)
        return data_converter.convert_document_to_gamestate(document)

    async def save(self, game_id: str, state: GameStateSchema) -> None:
        async with self.Session() as session:
            success = await UpdateData.update_game_record(
                game_id,
                data_converter.convert_gamestate_to_document(state),
                state.current_round,
                state.is_complete,
                session,
            )
            if not success:
                raise RuntimeError("Failed to update game data")

    async def create(self, state: GameStateSchema) -> None:
        async with self.Session() as session:
            success = await CreateData.create_game_record(
                state.id,
                data_converter.convert_gamestate_to_document(state),
                state.current_round,
                state.is_complete,
                session,
            )
            if not success:
                raise RuntimeError("Failed to create game data")

    async def delete(self, game_id: str) -> None:
        async with self.Session() as session:
            success = await DeleteData.delete_game_record(game_id, session)
            if not success:
                raise RuntimeError("Failed to delete game data")

    async def list_completed_before(self, cutoff: datetime) -> List[str]:
        async with self.Session() as session:
            return await CollectID.collect_completed_game_ids(cutoff, session)

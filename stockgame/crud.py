from datetime import datetime
from typing import List
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from stockgame.models.schemas import GameRecord


class CreateData:
    @staticmethod
    async def create_game_record(
        game_id: str, state: dict, current_round: int, is_complete: bool, session: AsyncSession
    ) -> bool:
        """Insert a new game row

        Args:
            game_id (str): To identify the game
            state (dict): camelCase GameState document
            current_round (int): Round the game is in, kept as a column for queries
            is_complete (bool): Whether the game has finished
            session (AsyncSession): AsyncSession object to interact with database

        Returns:
            bool: True when the row was committed
        """
        async with session:
            try:
                new_game = GameRecord(
                    game_id=game_id,
                    state=state,
                    current_round=current_round,
                    is_complete=is_complete,
                )
                session.add(new_game)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to create game data: {e}")
                return False


class ReadData:
    @staticmethod
    async def read_game_state(game_id: str, session: AsyncSession) -> dict | None:
        """Read the stored GameState document of a game

        Args:
            game_id (str): To identify the game

        Returns:
            dict | None: The state document, None when the game does not exist

        Raises:
            SQLAlchemyError: When the query itself failed
        """
        async with session:
            try:
                stmt = select(GameRecord.state).where(GameRecord.game_id == game_id)
                result = await session.execute(stmt)
                return result.scalars().first()
            except Exception as e:
                logging.error(f"Failed to read game data: {e}")
                raise


class UpdateData:
    @staticmethod
    async def update_game_record(
        game_id: str, state: dict, current_round: int, is_complete: bool, session: AsyncSession
    ) -> bool:
        """Replace the stored state of a game

        Args:
            game_id (str): To identify the game
            state (dict): camelCase GameState document
            current_round (int): Round the game is in
            is_complete (bool): Whether the game has finished
            session (AsyncSession): AsyncSession object to interact with database

        Returns:
            bool: True when the row existed and the update was committed
        """
        async with session:
            try:
                stmt = select(GameRecord).where(GameRecord.game_id == game_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return False

                result.state = state
                result.current_round = current_round
                result.is_complete = is_complete
                result.updated_at = datetime.now()
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to update game data: {e}")
                return False


class DeleteData:
    @staticmethod
    async def delete_game_record(game_id: str, session: AsyncSession) -> bool:
        async with session:
            try:
                stmt = delete(GameRecord).where(GameRecord.game_id == game_id)
                await session.execute(stmt)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to delete game data: {e}")
                return False


class CollectID:
    @staticmethod
    async def collect_completed_game_ids(cutoff: datetime, session: AsyncSession) -> List[str]:
        """Collect ids of completed games last updated before cutoff

        Returns:
            List[str]: List of game ids
        """
        async with session:
            try:
                stmt = select(GameRecord.game_id).where(
                    GameRecord.is_complete.is_(True), GameRecord.updated_at < cutoff
                )
                result = await session.execute(stmt)
                return list(result.scalars().all())
            except Exception as e:
                logging.error(f"Failed to collect game ids: {e}")
                return []

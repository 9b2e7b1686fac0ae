import logging
from asyncio import Lock


class GameLockManager:
    def __init__(self):
        self.game_locks = {}  # game_idごとのLockを管理
        self.lock = Lock()  # game_locksへのアクセスを保護

    async def get_lock(self, game_id: str) -> Lock:
        """Get the Lock of the specified game_id

        Args:
            game_id (str): ID to identify this game

        Returns:
            Lock: Lock serializing state transitions of the game
        """
        async with self.lock:
            if game_id not in self.game_locks:
                self.game_locks[game_id] = Lock()
            return self.game_locks[game_id]

    async def lock_count(self) -> int:
        async with self.lock:
            return len(self.game_locks)

    async def cleanup(self, game_id: str):
        """Delete Lock of the specified game_id

        Args:
            game_id (str): ID to identify this game
        """
        async with self.lock:
            if game_id in self.game_locks:
                del self.game_locks[game_id]
                logging.debug(f"Dropped lock of game {game_id}")

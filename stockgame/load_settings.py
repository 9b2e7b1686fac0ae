import os
from dotenv import load_dotenv

load_dotenv()

database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./stockgame.sqlite3")
redis_host = os.getenv("REDIS_HOST")
redis_port = int(os.getenv("REDIS_PORT", "6379"))
card_seed = os.getenv("CARD_SEED")
card_seed = int(card_seed) if card_seed else None
game_retention_hours = int(os.getenv("GAME_RETENTION_HOURS", "24"))
log_level = os.getenv("LOG_LEVEL", "INFO").upper()

if __name__ == "__main__":
    print(database_url, redis_host, redis_port, card_seed, game_retention_hours, log_level)

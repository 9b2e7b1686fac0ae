from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from stockgame.db import create_tables
from stockgame.load_settings import game_retention_hours, log_level
from stockgame.routers import game
from stockgame.routers.game import game_service

scheduler = AsyncIOScheduler()
logging.basicConfig(level=log_level)


async def purge_completed_games():
    await game_service.purge_completed_games(game_retention_hours)


@asynccontextmanager
async def lifespan(app):
    """Create the game table and schedule the purge of finished games.
    This function is called to start the server.
    """
    await create_tables()

    # If a completed game is older than the retention period, delete it
    scheduler.add_job(
        purge_completed_games,
        "interval",
        hours=24,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(game.game_router)

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime


class Base(DeclarativeBase):
    pass


class GameRecord(Base):
    __tablename__ = "game"
    game_id = Column(String, primary_key=True)
    # full camelCase GameState document
    state = Column(JSON().with_variant(JSONB, "postgresql"))
    current_round = Column(Integer)
    is_complete = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

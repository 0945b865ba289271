from commanderdle.db.database import get_session, init_db
from commanderdle.db.operations import (
    create_game,
    daily_game_to_model,
    game_exists,
    get_game,
    list_games_by_date,
    load_games_by_dates,
)

__all__ = [
    "create_game",
    "daily_game_to_model",
    "game_exists",
    "get_game",
    "get_session",
    "init_db",
    "list_games_by_date",
    "load_games_by_dates",
]

"""Settings, read from the environment (or a local .env file)."""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("CHESS_DATABASE_URL", "sqlite:///chess_games.db")
SQL_ECHO = os.getenv("CHESS_SQL_ECHO", "0").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("CHESS_LOG_LEVEL", "WARNING").upper()

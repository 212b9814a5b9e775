import logging
import os

from databases import Database

logger = logging.getLogger(__name__)

_database = None

DEFAULT_DATABASE_URL = "sqlite:///./posts.db"

CREATE_POSTS_TABLE = """
CREATE TABLE IF NOT EXISTS posts (
    id INTEGER PRIMARY KEY,
    user_id INTEGER,
    title TEXT,
    body VARCHAR(1000)
)
"""


def get_database() -> Database:
    global _database
    if _database:
        return _database
    _database = _create_database(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))
    return _database


def _create_database(database_url: str) -> Database:
    # Pool sizing only applies to the asyncpg backend
    if database_url.startswith("sqlite"):
        return Database(database_url)
    return Database(database_url, min_size=5, max_size=20)


async def init_database():
    database = get_database()
    if not database.is_connected:
        await database.connect()
    await database.execute(query=CREATE_POSTS_TABLE)
    logger.info("Posts table ready on %s", database.url.dialect)


async def close_database():
    global _database
    if _database and _database.is_connected:
        await _database.disconnect()
    _database = None

import logging
import sqlite3
from contextlib import contextmanager

import config
from database_schemas import ALL_TABLE_SCHEMAS
from exceptions import StoreError

logger = logging.getLogger(__name__)

DB_NAME = config.DB_NAME

@contextmanager
def get_db():
    try:
        conn = sqlite3.connect(DB_NAME)
    except sqlite3.Error as e:
        logger.error("Could not open database %s: %s", DB_NAME, e)
        raise StoreError("Database unavailable") from e
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    with get_db() as conn:
        cursor = conn.cursor()
        for schema in ALL_TABLE_SCHEMAS:
            cursor.execute(schema)
        conn.commit()
    logger.info("Database initialized at %s", DB_NAME)

if __name__ == "__main__":
    init_db()

# init_db.py
import logging

from sqlalchemy import inspect

import config
from database.config import engine, Base

# Import ALL models so SQLAlchemy knows about them
import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables(bind=engine):
    """Create all database tables and return their names."""
    logger.info("[DB] Creating database tables on %s", bind.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=bind)

    table_names = inspect(bind).get_table_names()
    logger.info("[DB] Tables in database: %s", table_names)
    return table_names


if __name__ == "__main__":
    config.configure_logging()
    create_tables()

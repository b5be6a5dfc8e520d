# init_db.py (in backend folder)

import logging

from sqlalchemy import inspect

from switchboard.infra.database import Base, engine, init_db
from switchboard.utils.logger import setup_logger

logger = logging.getLogger(__name__)


def reset_db():
    """Drop and recreate all tables"""
    logger.warning("Dropping all tables...")
    init_db()  # registers models before dropping
    Base.metadata.drop_all(bind=engine)
    init_db()

    inspector = inspect(engine)
    for table in inspector.get_table_names():
        columns = ", ".join(col["name"] for col in inspector.get_columns(table))
        logger.info("%s: %s", table, columns)


if __name__ == "__main__":
    setup_logger()
    reset_db()

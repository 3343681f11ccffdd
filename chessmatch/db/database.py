"""Generate database session"""

from typing import Generator, Optional

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessmatch.core.config import Settings, load_settings
from chessmatch.db.schema import Base


def create_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured database. Ensures all tables are created."""
    settings = settings or load_settings()
    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    Base.metadata.create_all(bind=engine)
    logger.debug(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def get_db(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    session_factory = sessionmaker(bind=engine or create_db_engine())
    db = session_factory()
    try:
        yield db
    finally:
        db.close()

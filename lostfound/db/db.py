import logging
from functools import lru_cache

from sqlmodel import Session, SQLModel, create_engine

from lostfound.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_engine():
    url = get_settings().database_url

    connect_args = {}
    if url.startswith("sqlite"):
        # sessions are used from FastAPI's threadpool
        connect_args["check_same_thread"] = False

    return create_engine(url, connect_args=connect_args)


def create_db_and_tables(engine=None):
    # models must be imported so their tables are registered on the metadata
    from lostfound.models import item, user  # noqa: F401

    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_session():
    with Session(get_engine()) as session:
        yield session

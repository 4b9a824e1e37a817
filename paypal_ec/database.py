from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from paypal_ec.config import DATABASE_URL


def _connect_args(url: str) -> dict:
    # SQLite sessions are handed across FastAPI's threadpool workers
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db(bind=None):
    # Models register themselves on Base.metadata when imported
    from paypal_ec import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

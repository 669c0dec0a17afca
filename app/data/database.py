# app/data/database.py
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.utils.retry import db_connect_retry
from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        #sqlite w pamieci: jedno polaczenie wspoldzielone przez wszystkie watki
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@db_connect_retry()
def wait_for_db(bind: Engine = engine) -> None:
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db(bind: Engine = engine) -> None:
    # import modeli zeby zarejestrowac tabele w Base.metadata
    import app.data.models  # noqa: F401

    wait_for_db(bind)
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ready")


def close_db(bind: Engine = engine) -> None:
    bind.dispose()
    logger.info("Database engine disposed")

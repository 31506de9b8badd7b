from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .config import settings


def make_engine(url: str, debug: bool = False):
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            return create_engine(
                url,
                future=True,
                echo=debug,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        return create_engine(url, future=True, echo=debug, connect_args=connect_args)
    # PostgreSQL with connection pooling
    return create_engine(
        url,
        future=True,
        echo=debug,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


engine = make_engine(settings.DATABASE_URL, debug=settings.DEBUG)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()

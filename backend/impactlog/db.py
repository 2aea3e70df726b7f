from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from impactlog.core.config import settings

# SQLAlchemy Base class for models to inherit
Base = declarative_base()

engine_kwargs = {"pool_pre_ping": True}  # helps avoid stale connections
if settings.database_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in settings.database_url:
        # one shared connection so every session sees the same database
        engine_kwargs["poolclass"] = StaticPool

# Create SQLAlchemy engine (connects to Postgres)
engine = create_engine(settings.database_url, **engine_kwargs)

# Factory that creates DB sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency: the cloud store opens its own short-lived sessions because a
# live subscription outlives any single request-scoped session.
def get_session_factory():
    return SessionLocal

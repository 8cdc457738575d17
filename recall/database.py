from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from recall.config import settings

def _connect_args(url: str) -> dict:
    # SQLite connections may be handed between threads by the pool
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}

engine = create_engine(
    settings.database_url,
    echo=settings.sql_echo,
    connect_args=_connect_args(settings.database_url)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def init_db(bind=None):
    """Create all tables"""
    # Import models so they register with Base.metadata
    import recall.models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)

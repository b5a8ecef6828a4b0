from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.engine.url import make_url
from config.settings import settings
from db.base import Base
import logging

logger = logging.getLogger(__name__)

engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 300}

def _make_sync_engine(database_url: str):
    url = make_url(database_url)
    # SQLite connections are shared between the threadpool workers
    if url.drivername.startswith("sqlite"):
        return create_engine(str(url), connect_args={"check_same_thread": False}, **engine_kwargs)
    return create_engine(str(url), **engine_kwargs)

engine = _make_sync_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()

def create_tables():
    """Create all tables"""
    # Register every table on the metadata before creating
    import models.order  # noqa: F401
    import models.product  # noqa: F401
    import models.transaction  # noqa: F401
    import models.user  # noqa: F401
    Base.metadata.create_all(bind=engine)

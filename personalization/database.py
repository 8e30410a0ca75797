from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from personalization.config import settings

engine = create_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Create all tables"""
    import personalization.models  # noqa: F401  registers models on Base

    Base.metadata.create_all(bind=bind or engine)

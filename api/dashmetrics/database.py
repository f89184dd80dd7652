from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .config import DATABASE_URL, METRICS_MAX_WORKERS

# Each concurrent loader checks out its own connection.
engine = create_engine(DATABASE_URL, future=True, pool_size=METRICS_MAX_WORKERS, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

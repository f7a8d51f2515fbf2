"""bnf_recommendation_service/models/database.py"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bnf_recommendation_service.config import get_database_timeout, get_database_url

# Get database URL
DATABASE_URL = get_database_url()

# Validate database URL is provided
if DATABASE_URL is None:
    raise ValueError("DATABASE_URL is not configured. Set the DATABASE_URL environment variable.")


def connect_args_for(url: str) -> dict:
    """
    Driver arguments bounding every socket operation.

    PyMySQL waits forever on a stalled server unless told otherwise; other
    drivers (SQLite in tests) get no extra arguments.
    """
    if url.startswith("mysql"):
        timeout = get_database_timeout()
        return {
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "write_timeout": timeout,
        }
    return {}


# Create engine
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=connect_args_for(DATABASE_URL),
    echo=False  # Set to True for SQL debugging
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

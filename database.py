import os
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import QueuePool
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

# Attempt to load environment variables from multiple common locations
BASE_DIR = Path(__file__).resolve().parent
ENV_CANDIDATES = [
    BASE_DIR / ".env",
    Path.cwd() / ".env",
]

for env_path in ENV_CANDIDATES:
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        break
else:
    # Fall back to default load (will pick up system env vars if already set)
    load_dotenv()

MONGO_SCHEMES = ("mongodb://", "mongodb+srv://")

# Database connection pooling configuration (used for non-SQLite databases)
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 20))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", 3600))  # Recycle connections after 1 hour

Base = declarative_base()


def resolve_database_url(raw: str = None) -> str:
    """
    Normalize the configured database URL.

    Some hosting environments accidentally prepend "DATABASE_URL=" to the value
    (e.g. when copying `export DATABASE_URL=...`). That prefix is stripped.
    An empty value falls back to a local SQLite file.
    """
    url = (raw if raw is not None else os.getenv("DATABASE_URL", "")).strip()

    prefix = "DATABASE_URL="
    if url.startswith(prefix):
        url = url[len(prefix):].strip()

    if not url:
        default_sqlite_path = BASE_DIR / "vendor_requests.db"
        url = f"sqlite:///{default_sqlite_path.as_posix()}"
        logger.warning(
            "DATABASE_URL not found in environment. Falling back to SQLite at %s",
            default_sqlite_path
        )
    return url


def is_mongo_url(url: str) -> bool:
    return url.startswith(MONGO_SCHEMES)


def create_sql_engine(url: str, **overrides) -> Engine:
    """Create a SQLAlchemy engine with pooling suited to the backend."""
    engine_kwargs = {
        "echo": False,
        "future": True,
        "pool_pre_ping": True,
    }

    # SQLite has different pooling requirements
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(
            {
                "poolclass": QueuePool,
                "pool_size": POOL_SIZE,
                "max_overflow": MAX_OVERFLOW,
                "pool_timeout": POOL_TIMEOUT,
                "pool_recycle": POOL_RECYCLE,
            }
        )
    engine_kwargs.update(overrides)

    engine = create_engine(url, **engine_kwargs)

    # Log connection pool status for observability
    if url.startswith("sqlite"):
        logger.info("Database configured with SQLite at %s", url)
    else:
        logger.info("Database connection pool configured: size=%s, max_overflow=%s", POOL_SIZE, MAX_OVERFLOW)
    return engine

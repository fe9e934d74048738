# config.py

from starlette.config import Config
from starlette.datastructures import Secret

# --- Configuration (Load from Environment) ---

# Values come from OS environment variables first, then from a local .env file if present
config = Config(".env")

DATABASE_URL: str = config("DATABASE_URL", default="sqlite+aiosqlite:///./bucketwise.db")
DB_POOL_SIZE: int = config("DB_POOL_SIZE", cast=int, default=10)
DB_MAX_OVERFLOW: int = config("DB_MAX_OVERFLOW", cast=int, default=5)
DB_ECHO: bool = config("DB_ECHO", cast=bool, default=False)

# Empty key disables the X-API-Key check (local development)
API_KEY: Secret = config("BUCKETWISE_API_KEY", cast=Secret, default="")

# Upper bound for a single engine operation (allocation, purchase, reconciliation)
OPERATION_TIMEOUT_SECONDS: float = config("BUCKETWISE_OPERATION_TIMEOUT_SECONDS", cast=float, default=10.0)

DEFAULT_CURRENCY: str = config("BUCKETWISE_DEFAULT_CURRENCY", default="USD")
DEFAULT_MODE: str = config("BUCKETWISE_DEFAULT_MODE", default="intermediate")

LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")

# Lifespan switches (tables are managed by migrations in production)
CREATE_TABLES: bool = config("BUCKETWISE_CREATE_TABLES", cast=bool, default=True)
SEED_BUCKETS: bool = config("BUCKETWISE_SEED_BUCKETS", cast=bool, default=True)


def async_database_url(url: str) -> str:
    """Rewrites a plain Postgres URL for the asynchronous psycopg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    return url

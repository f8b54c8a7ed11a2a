import os
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

def _get_env(key: str, default: str | None = None) -> str:
    val = os.getenv(key, default)
    if val is None:
        raise RuntimeError(f"Missing required env var: {key}")
    return val

def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).lower() in ("1", "true", "yes")

APP_ENV = _get_env("APP_ENV", "local")
DATABASE_URL = _get_env("DATABASE_URL", "sqlite:///./linkup.db")
LOG_LEVEL = _get_env("LOG_LEVEL", "DEBUG")
LOG_FILE = _get_env("LOG_FILE", "logs/app.log")
SQL_ECHO_LOGS = _get_bool("SQL_ECHO_LOGS", "false")

# Notification feed cap
FEED_LIMIT = int(_get_env("FEED_LIMIT", "50"))

# Only accepted connections may exchange messages
REQUIRE_CONNECTION_FOR_MESSAGES = _get_bool("REQUIRE_CONNECTION_FOR_MESSAGES", "true")

logger.debug(f"Config loaded: APP_ENV={APP_ENV}, DATABASE_URL={DATABASE_URL}, LOG_LEVEL={LOG_LEVEL}")

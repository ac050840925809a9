from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_int(key: str, default: int) -> int:
    """Get environment variable as int, falling back to default when unset or invalid."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def get_config() -> dict[str, str]:
    """
    Load configuration from environment variables.
    Called lazily so that importing the package never touches the environment.
    """
    return {
        "DB_PATH": os.getenv("JOB_BOARD_DB_PATH", "job_board.db"),
        "STORE_TIMEOUT": os.getenv("STORE_TIMEOUT", "5"),
        "QUERY_BATCH_SIZE": os.getenv("QUERY_BATCH_SIZE", "100"),
        "DEFAULT_PAGE_SIZE": os.getenv("DEFAULT_PAGE_SIZE", "10"),
    }


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a positive integer, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


class _Config:
    """Lazy configuration that only validates when values are actually accessed."""

    def __init__(self) -> None:
        self._config: dict[str, str] | None = None

    def _get(self, key: str) -> str:
        if self._config is None:
            self._config = get_config()
        return self._config[key]

    @property
    def DB_PATH(self) -> str:
        return self._get("DB_PATH")

    @property
    def STORE_TIMEOUT(self) -> float:
        """Seconds a boundary call waits on the store. Must be positive."""
        raw = self._get("STORE_TIMEOUT")
        try:
            timeout = float(raw)
        except ValueError:
            raise ValueError(f"STORE_TIMEOUT must be a positive number, got '{raw}'") from None
        if timeout <= 0:
            raise ValueError(f"STORE_TIMEOUT must be a positive number, got {timeout}")
        return timeout

    @property
    def QUERY_BATCH_SIZE(self) -> int:
        """Number of documents read per batch when scanning a collection."""
        return _positive_int("QUERY_BATCH_SIZE", self._get("QUERY_BATCH_SIZE"))

    @property
    def DEFAULT_PAGE_SIZE(self) -> int:
        return _positive_int("DEFAULT_PAGE_SIZE", self._get("DEFAULT_PAGE_SIZE"))


_cfg = _Config()

# Module-level type declarations for mypy.
# The actual values come from __getattr__ below.
DB_PATH: str
STORE_TIMEOUT: float
QUERY_BATCH_SIZE: int
DEFAULT_PAGE_SIZE: int


# Module-level lazy access using __getattr__ (PEP 562).
# `from job_board.config import STORE_TIMEOUT` resolves the value on first access.
def __getattr__(name: str) -> str | float | int:
    if name in ("DB_PATH", "STORE_TIMEOUT", "QUERY_BATCH_SIZE", "DEFAULT_PAGE_SIZE"):
        return getattr(_cfg, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

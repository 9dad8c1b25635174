from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# .env file is in the project root (parent of src/)
# Only use if it exists (CI uses environment variables directly)
# Path: core/config.py -> herdbook -> src -> project root -> .env
_ENV_FILE = Path(__file__).parent.parent.parent.parent / ".env"
_ENV_FILE = _ENV_FILE if _ENV_FILE.exists() else None


@lru_cache
def get_cache_dir() -> Path:
    """Get the cache directory (.cache/ in workspace root).

    Looks for project root by finding .git or pyproject.toml,
    then returns .cache/ within that root.
    """
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / ".git").exists() or (parent / "pyproject.toml").exists():
            cache_dir = parent / ".cache"
            cache_dir.mkdir(exist_ok=True)
            return cache_dir
    # Fallback to current working directory
    cache_dir = Path.cwd() / ".cache"
    cache_dir.mkdir(exist_ok=True)
    return cache_dir


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Farm backend REST API (the /api prefix is part of the URL)
    herdbook_api_url: str = "http://localhost:5000/api"
    herdbook_api_token: str | None = None  # JWT issued by the backend's /Auth/login

    # Seconds before an API request is abandoned
    request_timeout: float = 30.0

    # Pedigree depth accepted by the reports (generations above the animal)
    default_generations: int = 3
    # Inbreeding coefficient default depth
    default_coefficient_generations: int = 5
    min_generations: int = 1
    max_generations: int = 8

    # Max parallel animal lookups while building one pedigree
    max_concurrent_lookups: int = 5


settings = Settings()

"""Core module - configuration and API client."""

from herdbook.core import client
from herdbook.core.client import (
    HerdbookAPIError,
    RetryableError,
    get_all_animal_records,
    get_animal_page,
    get_animal_record,
    http_get,
    http_get_with_retry,
)
from herdbook.core.config import get_cache_dir, settings

__all__ = [
    "client",
    "settings",
    "get_cache_dir",
    "http_get",
    "http_get_with_retry",
    "get_animal_record",
    "get_animal_page",
    "get_all_animal_records",
    "RetryableError",
    "HerdbookAPIError",
]

"""Farm backend API client - core functions only."""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from herdbook.core.config import settings

# =============================================================================
# Retry Configuration
# =============================================================================

MAX_RETRIES = 3
MIN_WAIT_SECONDS = 1
MAX_WAIT_SECONDS = 10

# Page size used when downloading the whole registry
DEFAULT_PAGE_SIZE = 100


# =============================================================================
# Exceptions
# =============================================================================


class RetryableError(Exception):
    """Transient error that should be retried (timeouts, connection errors, 5xx)."""

    pass


class HerdbookAPIError(Exception):
    """Non-retryable error from the farm backend API."""

    pass


# =============================================================================
# Client Functions
# =============================================================================


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if settings.herdbook_api_token:
        headers["Authorization"] = f"Bearer {settings.herdbook_api_token}"
    return headers


def _url(path: str) -> str:
    return f"{settings.herdbook_api_url.rstrip('/')}/{path.lstrip('/')}"


async def http_get(path: str, params: dict | None = None) -> httpx.Response:
    """GET a backend resource without retry.

    Args:
        path: Resource path relative to the API root (e.g. "Animales/12")
        params: Optional query parameters

    Returns:
        The raw response. Status is NOT checked here so callers can
        treat 404 as a normal outcome.
    """
    async with httpx.AsyncClient() as client:
        return await client.get(
            _url(path),
            headers=_headers(),
            params=params,
            timeout=settings.request_timeout,
        )


@retry(
    retry=retry_if_exception_type(RetryableError),
    stop=stop_after_attempt(MAX_RETRIES),
    wait=wait_exponential_jitter(initial=MIN_WAIT_SECONDS, max=MAX_WAIT_SECONDS, jitter=2),
    reraise=True,
)
async def http_get_with_retry(path: str, params: dict | None = None, allow_not_found: bool = False) -> dict | None:
    """GET a backend resource with automatic retry on transient errors.

    Retries on:
    - Timeouts
    - Connection errors
    - HTTP 5xx errors

    Args:
        path: Resource path relative to the API root
        params: Optional query parameters
        allow_not_found: Return None on 404 instead of raising

    Returns:
        Parsed JSON body, or None for a tolerated 404

    Raises:
        RetryableError: If all retries fail
        HerdbookAPIError: On non-retryable (4xx) errors
    """
    try:
        response = await http_get(path, params)
    except httpx.TimeoutException as e:
        raise RetryableError(f"Request timed out: {e}") from e
    except httpx.ConnectError as e:
        raise RetryableError(f"Connection failed: {e}") from e

    if response.status_code == 404 and allow_not_found:
        return None

    if response.status_code >= 500:
        # Server error - retry with backoff
        raise RetryableError(f"HTTP {response.status_code}: {response.text}")

    if response.status_code >= 400:
        # Client error (4xx) - don't retry, include full response
        raise HerdbookAPIError(f"HTTP {response.status_code}: {response.text}")

    return response.json()


async def get_animal_record(animal_id: int) -> dict | None:
    """Fetch one animal (AnimalDTO) by ID, or None if the backend has no record."""
    return await http_get_with_retry(f"Animales/{animal_id}", allow_not_found=True)


async def get_animal_page(page: int, page_size: int = DEFAULT_PAGE_SIZE) -> dict:
    """Fetch one page of the animal registry, active and inactive animals alike.

    Returns:
        PagedResult dict with items, totalCount, pageNumber, pageSize
    """
    params = {"page": page, "pageSize": page_size, "status": "todos"}
    return await http_get_with_retry("Animales", params=params)


async def get_all_animal_records(page_size: int = DEFAULT_PAGE_SIZE) -> list[dict]:
    """Download the full animal registry, following pagination."""
    records: list[dict] = []
    page = 1

    while True:
        result = await get_animal_page(page, page_size)
        items = result.get("items") or []
        records.extend(items)

        total = result.get("totalCount", 0)
        if not items or len(records) >= total:
            break
        page += 1

    return records

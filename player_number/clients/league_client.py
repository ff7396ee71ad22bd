import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from player_number.config.settings import AppSettings
from player_number.models.enums import League, RecordKind
from player_number.normalization.keys import normalize_keys

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# Container object and array field each record kind is nested under
RECORD_PATHS: Dict[RecordKind, Tuple[str, str]] = {
    RecordKind.TEAM_STANDINGS: ("overallteamstandings", "teamstandingsentry"),
    RecordKind.GAME_SCHEDULE: ("fullgameschedule", "gameentry"),
    RecordKind.PLAYER_STATS: ("cumulativeplayerstats", "playerstatsentry"),
}


class FetchError(Exception):
    """Upstream request failed or returned a non-success status."""

    pass


class AuthenticationError(FetchError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class ParseError(Exception):
    """Upstream body is not JSON or lacks the expected record array."""

    pass


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.RequestError)


def parse_records(body: bytes, kind: RecordKind) -> List[Dict[str, Any]]:
    """Decodes a feed body with key normalization and returns its record array."""
    try:
        document = json.loads(body, object_hook=normalize_keys)
    except ValueError as e:  # JSONDecodeError and undecodable bytes
        raise ParseError(f"Invalid JSON for {kind.value}: {e}") from e

    container_key, array_key = RECORD_PATHS[kind]
    container = document.get(container_key) if isinstance(document, dict) else None
    records = container.get(array_key) if isinstance(container, dict) else None
    if not isinstance(records, list):
        raise ParseError(f"Missing '{container_key}.{array_key}' array for {kind.value}")
    return records


class LeagueClient:
    """Authenticated client for the per-league stats feeds."""

    def __init__(self, settings: AppSettings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.auth = httpx.BasicAuth(settings.api_username, settings.api_password)
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
        )
        self.client.headers.update(
            {"Accept": "application/json", "Accept-Encoding": "gzip"}
        )

    def url_for(self, league: League, kind: RecordKind) -> str:
        return f"{self.settings.api_base_url}{league.value}{self.settings.path_for(kind)}"

    async def fetch(self, league: League, kind: RecordKind) -> List[Dict[str, Any]]:
        """Fetches one record kind for one league."""
        url = self.url_for(league, kind)
        response = await self._make_request("GET", url)
        records = parse_records(response.content, kind)
        logger.info(f"Fetched {len(records)} {kind.value} records for {league.value}")
        return records

    async def _make_request(self, method: str, url: str) -> httpx.Response:
        """Makes the request, retrying only when fetch_attempts allows it."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.settings.fetch_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        try:
            return await retrying(self._send, method, url)
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP {e.response.status_code} from {url}")
            raise FetchError(f"HTTP error {e.response.status_code} for {url}") from e
        except httpx.RequestError as e:
            logger.error(f"Request to {url} failed: {e!r}")
            raise FetchError(f"Request failed for {url}: {e}") from e

    async def _send(self, method: str, url: str) -> httpx.Response:
        logger.debug(f"Making request: {method} {url}")
        response = await self.client.request(method, url, auth=self.auth)

        if response.status_code in {401, 403}:
            logger.warning(
                f"Authentication error ({response.status_code}) at {url}. Check API credentials."
            )
            raise AuthenticationError(f"Authentication failed ({response.status_code})")

        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.warning(f"Retryable status {response.status_code} from {url}")

        response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info("Closed stats API HTTP client")

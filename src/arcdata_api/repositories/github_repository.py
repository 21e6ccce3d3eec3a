"""GitHub-backed data source.

Reads the dataset from two GitHub surfaces:

- raw.githubusercontent.com for file contents, passed through unparsed
- the contents API for directory listings, parsed into item identifiers

Every outbound call carries a fixed ``User-Agent``. Failures are
classified into ``UpstreamNotFound`` (404) and ``UpstreamUnavailable``
(everything else, including transport errors and malformed listings).
No retries are attempted.
"""

import logging
import unicodedata

import httpx
from pydantic import ValidationError

from arcdata_api.config import settings
from arcdata_api.dto import parse_manifest
from arcdata_api.errors import UpstreamNotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"

# Collation order for characters that can appear in identifiers:
# punctuation first, then digits, then letters.
_COLLATION = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$0123456789abcdefghijklmnopqrstuvwxyz"
_WEIGHTS = {ch: i for i, ch in enumerate(_COLLATION)}


def collation_key(name: str) -> tuple[tuple[int, ...], tuple[int, ...], str]:
    """Sort key approximating locale-aware string comparison.

    Primary level ignores case and accents, secondary level orders accents,
    and lowercase sorts before uppercase on otherwise equal strings.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = [ch for ch in decomposed if not unicodedata.combining(ch)]
    primary = tuple(_WEIGHTS.get(ch.lower(), len(_COLLATION) + ord(ch.lower())) for ch in base)
    secondary = tuple(ord(ch) for ch in decomposed if unicodedata.combining(ch))
    return primary, secondary, name.swapcase()


def identifiers_from_manifest(payload: object, url: str = "directory listing") -> list[str]:
    """Turn a decoded directory listing into sorted item identifiers.

    Keeps files named ``*.json`` that do not start with ``_``.

    Raises:
        UpstreamUnavailable: If the payload does not look like a listing
    """
    try:
        entries = parse_manifest(payload)
    except ValidationError as e:
        raise UpstreamUnavailable(url) from e

    ids = [
        entry.name[: -len(JSON_SUFFIX)]
        for entry in entries
        if entry.is_file and entry.name.endswith(JSON_SUFFIX) and not entry.name.startswith("_")
    ]
    return sorted(ids, key=collation_key)


class GitHubRepository:
    """GitHub implementation of the DataSource protocol.

    This class satisfies the DataSource protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        source = GitHubRepository.create()

        body = await source.fetch_raw("bots.json")
        ids = await source.list_directory("items")
        ```
    """

    def __init__(
        self,
        raw_base: str | None = None,
        api_base: str | None = None,
        user_agent: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the GitHub data source.

        Args:
            raw_base: Base URL for raw file contents. Defaults to settings.
            api_base: Base URL of the contents API. Defaults to settings.
            user_agent: Identifying header sent on every call. Defaults to settings.
            token: Optional API token for directory listings. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            client: Pre-built HTTP client (tests pass one with a mock transport).
        """
        self._raw_base = (raw_base or settings.github_raw_base).rstrip("/")
        self._api_base = (api_base or settings.github_api_base).rstrip("/")
        self._user_agent = user_agent or settings.upstream_user_agent
        self._token = token if token is not None else settings.github_token
        self._timeout = timeout or settings.upstream_timeout
        self._client = client

    @classmethod
    def create(
        cls,
        raw_base: str | None = None,
        api_base: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "GitHubRepository":
        """Factory method to create GitHubRepository with defaults.

        Args:
            raw_base: Raw content base URL. If None, uses settings.
            api_base: Contents API base URL. If None, uses settings.
            client: Optional pre-built HTTP client.

        Returns:
            Configured GitHubRepository
        """
        return cls(raw_base=raw_base, api_base=api_base, client=client)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    def raw_url(self, path: str) -> str:
        return f"{self._raw_base}/{path}"

    def listing_url(self, dir_path: str) -> str:
        return f"{self._api_base}/{dir_path}"

    async def _get(self, url: str, headers: dict[str, str]) -> httpx.Response:
        try:
            response = await self.client.get(url, headers={"User-Agent": self._user_agent, **headers})
        except httpx.HTTPError as e:
            logger.warning("Upstream transport error for %s: %s", url, e)
            raise UpstreamUnavailable(url) from e

        if response.status_code == 404:
            raise UpstreamNotFound(url, 404)
        if not response.is_success:
            logger.warning("Upstream returned %s for %s", response.status_code, url)
            raise UpstreamUnavailable(url, response.status_code)
        return response

    async def fetch_raw(self, path: str) -> bytes:
        """Fetch a raw file body, unparsed.

        Args:
            path: Path below the raw base, including the extension

        Returns:
            The response body exactly as upstream sent it

        Raises:
            UpstreamNotFound: Upstream answered 404
            UpstreamUnavailable: Any other failure
        """
        response = await self._get(self.raw_url(path), {})
        return response.content

    async def list_directory(self, dir_path: str) -> list[str]:
        """List item identifiers in a directory.

        Args:
            dir_path: Directory path below the contents-API base

        Returns:
            Identifiers (file names without ``.json``) in canonical order

        Raises:
            UpstreamError: Listing could not be fetched or parsed
        """
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        url = self.listing_url(dir_path)
        response = await self._get(url, headers)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(url, response.status_code) from e

        return identifiers_from_manifest(payload, url)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

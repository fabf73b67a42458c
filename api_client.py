"""
OpenAlex API client: the single gateway through which every remote fetch goes.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import orjson
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import config
from models import Entity, EntityKind, ListingPage, decode

logger = logging.getLogger(__name__)

OPENALEX_URL_PREFIXES = ("https://openalex.org/", "http://openalex.org/")


class FetchError(Exception):
    """A remote fetch or decode failed for one locator."""

    def __init__(self, locator: str, cause: Exception):
        super().__init__(f"API error when fetching or deserializing {locator}: {cause}")
        self.locator = locator
        self.cause = cause


def _check_locator(locator: Any) -> None:
    if not isinstance(locator, str):
        raise TypeError(f"Expected a string identifier, got {type(locator).__name__}")


class OpenAlexAPI:
    """Handles OpenAlex API interactions"""

    def __init__(
        self,
        email: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize API client.

        Args:
            email: Your email for polite pool (faster, recommended)
            base_url: API host, defaults to config.api.base_url
            timeout: Per-request timeout in seconds
            max_retries: Transport-level retries on 429/5xx responses (0 disables)
            session: Pre-built session to reuse; one is created otherwise
        """
        settings = config.api
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.email = email or settings.email
        self.timeout = settings.timeout if timeout is None else timeout
        self.per_page = settings.per_page

        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {"Accept": "application/json", "User-Agent": settings.user_agent}
        )
        if self.email:
            self.session.params = {"mailto": self.email}

        retries = settings.max_retries if max_retries is None else max_retries
        if retries:
            retry = Retry(
                total=retries,
                allowed_methods=["GET"],
                backoff_factor=settings.backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
            )
            adapter = HTTPAdapter(max_retries=retry)
            self.session.mount("https://", adapter)
            self.session.mount("http://", adapter)

    # ------------------------------------------------------------------
    # Locators
    # ------------------------------------------------------------------
    def entity_url(self, locator: str, kind: EntityKind) -> str:
        """
        Map an identifier to the API URL of the single entity it names.

        Accepts bare OpenAlex IDs ('W2741809807'), OpenAlex URLs, API URLs (returned
        unchanged) and external IDs the API resolves itself (DOI/ORCID/ROR URLs,
        'doi:10.1234/abc').
        """
        _check_locator(locator)
        locator = locator.strip()
        if locator.startswith(self.base_url + "/"):
            return locator

        key = locator
        for prefix in OPENALEX_URL_PREFIXES:
            if key.startswith(prefix):
                key = key[len(prefix):]
                break
        if key.startswith(kind.collection + "/"):
            key = key[len(kind.collection) + 1:]

        return f"{self.base_url}/{kind.collection}/{key}"

    def random_url(self, kind: EntityKind) -> str:
        return f"{self.base_url}/{kind.collection}/random"

    def search_url(self, kind: EntityKind, text: str) -> str:
        return f"{self.base_url}/{kind.collection}?{urlencode({'search': text})}"

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("GET %s", url)
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return orjson.loads(response.content)

    def fetch_one(self, locator: str, kind: EntityKind) -> Entity:
        """
        Fetch and decode a single entity.

        Args:
            locator: Identifier or identifier-bearing URL
            kind: Kind the response is decoded as

        Raises:
            FetchError: network error, non-success status or malformed body
        """
        try:
            url = self.entity_url(locator, kind)
            return decode(self._get_json(url), kind)
        except (requests.RequestException, ValueError, TypeError, KeyError) as exc:
            raise FetchError(locator, exc) from exc

    def fetch_page(self, locator: str, kind: EntityKind) -> ListingPage:
        """
        Fetch the first page of a listing URL such as a `works_api_url`.

        Raises:
            FetchError: network error, non-success status or malformed envelope
        """
        try:
            _check_locator(locator)
            params = None
            if "per-page=" not in locator and "per_page=" not in locator:
                params = {"per-page": self.per_page}
            return ListingPage.from_json(self._get_json(locator, params=params), kind)
        except (requests.RequestException, ValueError, TypeError, KeyError) as exc:
            raise FetchError(locator, exc) from exc

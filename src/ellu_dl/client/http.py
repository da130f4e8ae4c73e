"""HTTP client for the Ellu web reader."""

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup

from ..models import ElluConfig
from ..utils.exceptions import AuthenticationError, FetchError, NotFoundError


logger = logging.getLogger("ElluDL.client")


class ElluClient:
    """Blocking HTTP client for the Ellu reader.

    The session cookie is scoped to the reader host, every request shares
    the configured timeout and nothing is retried: a failure is reported
    once and the caller decides what to do with it.

    Example:
        with ElluClient("ellu.ee", config) as client:
            soup = client.get_document("https://ellu.ee/books/9789949/foo")
            body = client.request_raw("POST", "https://ellu.ee/reader?book_id=1")
    """

    def __init__(self, host: str, config: ElluConfig):
        """Initialize the HTTP client.

        Args:
            host: Host name the session cookie is valid for
            config: Application configuration
        """
        self._config = config
        cookies = httpx.Cookies()
        if config.cookie:
            cookies.set(config.cookie_name, config.cookie, domain=host)

        self._client = httpx.Client(
            cookies=cookies,
            timeout=config.timeout,
            follow_redirects=True,
            headers={"User-Agent": config.user_agent},
        )

    def __enter__(self) -> "ElluClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response

        Raises:
            AuthenticationError: On 401 Unauthorized or 403 Forbidden
            NotFoundError: On 404 Not Found
            FetchError: On any other network/HTTP error
        """
        logger.debug(f"{method} {url}")
        try:
            response = self._client.request(method, url, **kwargs)

            if response.status_code in (401, 403):
                raise AuthenticationError(
                    f"HTTP {response.status_code} for {url}: session cookie missing or expired"
                )

            if response.status_code == 404:
                raise NotFoundError(f"Resource not found: {url}")

            response.raise_for_status()

            return response

        except FetchError:
            raise
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP error {e.response.status_code}: {url}") from e
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out after {self._config.timeout}s: {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"{method} {url}: {e}") from e

    def get_document(self, url: str) -> BeautifulSoup:
        """Fetch an HTML page and parse it.

        Args:
            url: Page URL

        Returns:
            Parsed document

        Raises:
            FetchError: On network/HTTP errors
        """
        response = self._request("GET", url)
        return BeautifulSoup(response.content, "lxml")

    def request_raw(self, method: str, url: str, content: bytes | None = None) -> bytes:
        """Send a request and return the raw response body.

        Args:
            method: HTTP method
            url: Request URL
            content: Optional request body

        Returns:
            Raw content bytes

        Raises:
            FetchError: On network/HTTP errors
        """
        response = self._request(method, url, content=content)
        return response.content

    def get_bytes(self, url: str) -> bytes:
        """Download binary content (images).

        Raises:
            FetchError: On download errors
        """
        return self.request_raw("GET", url)

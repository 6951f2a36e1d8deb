"""HTTP client for the GitLab and GitHub REST APIs."""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Union

import httpx

from ..config import DEFAULT_TIMEOUT, get_api_headers
from ..utils.errors import RequestFailedError, UnexpectedResponseError
from ..utils.redact import redact_token, safe_error_message


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BasicCredential:
    """GitHub style: 'username:token' sent as a Basic Authorization header."""

    username_and_token: str

    def apply(self, headers: Dict[str, str], params: Dict[str, str]) -> None:
        encoded = base64.b64encode(self.username_and_token.encode("utf-8")).decode("ascii")
        headers["Authorization"] = f"Basic {encoded}"


@dataclass(frozen=True)
class QueryTokenCredential:
    """GitLab style: personal access token sent in the query string."""

    token: str
    param: str = "private_token"

    def apply(self, headers: Dict[str, str], params: Dict[str, str]) -> None:
        params[self.param] = self.token


Credential = Union[BasicCredential, QueryTokenCredential]


class Page(NamedTuple):
    """One decoded response body plus the link to the following page, if any."""

    data: Any
    next_link: Optional[str] = None


class ProviderClient:
    """Client for issuing GET requests against a hosting provider's API."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the API client.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the network in tests)
        """
        self.timeout = timeout
        self._transport = transport
        logger.debug(f"ProviderClient initialized with {timeout}s timeout")

    @staticmethod
    def next_page_link(response: httpx.Response) -> Optional[str]:
        """Return the URL of the Link header entry with rel="next", if there is one."""
        return response.links.get("next", {}).get("url")

    def get(self, url: str, credential: Optional[Credential] = None) -> Page:
        """
        Send a single GET request and decode the JSON body.

        There's no retry: any failure aborts the session.

        Args:
            url: Full request URL (may already carry query parameters)
            credential: Optional credential to inject

        Returns:
            Page with the decoded body and the next-page link

        Raises:
            RequestFailedError: On network failure or non-success status
            UnexpectedResponseError: If the body isn't JSON
        """
        headers = get_api_headers()
        params: Dict[str, str] = {}
        if credential is not None:
            credential.apply(headers, params)

        logger.info(f"GET {redact_token(url)}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url, headers=headers, params=params or None)
        except httpx.RequestError as e:
            logger.error(f"Network error: {safe_error_message(e, 'Network error')}")
            raise RequestFailedError(
                redact_token(url),
                reason=safe_error_message(e, "Network error while contacting the hosting API")
            ) from e

        if not response.is_success:
            raise RequestFailedError(
                redact_token(str(response.request.url)),
                status_code=response.status_code,
                headers=dict(response.headers),
                body=response.text
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UnexpectedResponseError("<body>", "a JSON document", redact_token(url)) from e

        next_link = self.next_page_link(response)
        if next_link:
            logger.debug(f"Next page: {redact_token(next_link)}")
        return Page(data, next_link)

from __future__ import annotations

import random
from itertools import takewhile
from typing import Dict, NamedTuple, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    HTTP_TIMEOUT,
    HTTP_OPEN_TIMEOUT,
    HTTP_MAX_RETRIES,
    HTTP_BACKOFF_INITIAL,
    HTTP_BACKOFF_RANDOMNESS,
    HTTP_BACKOFF_FACTOR,
    HTTP_RETRY_METHODS,
    USER_AGENT,
)
from .exceptions import TRANSPORT_ERRORS, TransientTransportError
from .log_utils import logger, LogSource, LogCategory

DEFAULT_JSON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
}


class HttpResponse(NamedTuple):
    """
    What the client needs from an HTTP response: the status code and the body text.
    """
    status: int
    body: str


class BackoffRetry(Retry):
    """
    Retry policy with an exponentially growing delay plus random jitter.

    Before retry n (counting from 1) it sleeps
    ``initial * factor ** (n - 1) + random() * randomness * initial`` seconds,
    so with the defaults roughly 0.5, 1 and 2 seconds, each plus up to 0.25.
    """

    backoff_initial = HTTP_BACKOFF_INITIAL
    backoff_randomness = HTTP_BACKOFF_RANDOMNESS
    backoff_multiplier = HTTP_BACKOFF_FACTOR

    def get_backoff_time(self) -> float:
        consecutive_errors = len(list(takewhile(lambda x: x.redirect_location is None, reversed(self.history))))
        if consecutive_errors == 0:
            return 0.0
        delay = self.backoff_initial * (self.backoff_multiplier ** (consecutive_errors - 1))
        delay += random.random() * self.backoff_randomness * self.backoff_initial
        return min(self.backoff_max, delay)


def build_retry(max_retries: int = HTTP_MAX_RETRIES) -> BackoffRetry:
    """
    Retry connection failures and read timeouts on GET requests only. A
    response that arrived, whatever its status, is handed back to the caller.
    """
    return BackoffRetry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        allowed_methods=frozenset(HTTP_RETRY_METHODS),
        status_forcelist=None,
        raise_on_status=False,
        respect_retry_after_header=False,
    )


def build_session(max_retries: int = HTTP_MAX_RETRIES) -> requests.Session:
    """
    Create a requests session whose adapters apply the retry policy.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry(max_retries))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class Connection:
    """
    Authenticated GET access to one base URL.

    Any object with a compatible ``get(path) -> HttpResponse`` method can
    stand in for this class when handed to the client.
    """

    def __init__(
            self,
            base_url: str,
            authorization: Optional[str] = None,
            session: Optional[requests.Session] = None,
            timeout: float = HTTP_TIMEOUT,
            open_timeout: float = HTTP_OPEN_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.open_timeout = open_timeout
        self.session = session if session is not None else build_session()
        self.session.headers.update(DEFAULT_JSON_HEADERS)
        if authorization:
            self.session.headers["Authorization"] = authorization

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def get(self, path: str) -> HttpResponse:
        """
        Send a GET request for a path below the base URL and return its
        status and body, whatever the status is.

        Raises TransientTransportError when the request could not complete
        even after retries.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url}", source=LogSource.MAIS, category=LogCategory.FETCH)
        try:
            resp = self.session.get(url, timeout=(self.open_timeout, self.timeout))
        except TRANSPORT_ERRORS as e:
            raise TransientTransportError(f"GET {url} failed: {e}") from e
        return HttpResponse(status=resp.status_code, body=resp.text)
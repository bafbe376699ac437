from __future__ import annotations

from typing import Optional

import requests

from .config import TOKEN_PATH, AUTHORIZE_PATH, HTTP_OPEN_TIMEOUT, HTTP_TIMEOUT
from .exceptions import JSON_ERRORS, TRANSPORT_ERRORS, TokenError, TransientTransportError
from .http_utils import DEFAULT_JSON_HEADERS
from .log_utils import logger, LogSource, LogCategory
from .models import ClientConfig


def fetch_token(
        client_id: str,
        client_secret: str,
        base_url: str,
        session: Optional[requests.Session] = None,
) -> str:
    """
    Exchange client credentials for an access token with the OAuth2 client
    credentials grant. The credentials go in the form body rather than in a
    Basic authorization header.

    Returns the value for an Authorization header, "Bearer <token>".
    """
    token_url = f"{base_url.rstrip('/')}{TOKEN_PATH}"
    payload = {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
    }
    poster = session if session is not None else requests

    logger.info("Requesting access token", source=LogSource.OAUTH, category=LogCategory.AUTH)
    try:
        resp = poster.post(
            token_url,
            data=payload,
            headers=DEFAULT_JSON_HEADERS.copy(),
            timeout=(HTTP_OPEN_TIMEOUT, HTTP_TIMEOUT),
        )
    except TRANSPORT_ERRORS as e:
        raise TransientTransportError(f"POST {token_url} failed: {e}") from e

    if resp.status_code != 200:
        raise TokenError(
            f"Token endpoint returned {resp.status_code}: {resp.text}",
            status=resp.status_code,
            body=resp.text,
        )

    try:
        token = resp.json().get("access_token")
    except JSON_ERRORS + (AttributeError,) as e:
        raise TokenError(f"Token endpoint returned an unreadable body: {resp.text}", status=200, body=resp.text) from e

    if not token:
        raise TokenError("Token endpoint response has no access_token", status=200, body=resp.text)

    logger.success("Access token received", source=LogSource.OAUTH, category=LogCategory.AUTH)
    return f"Bearer {token}"


class TokenProvider:
    """
    Obtains bearer tokens for the MAIS API. Nothing is cached: every call to
    acquire() performs a fresh exchange.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session

    @property
    def token_url(self) -> str:
        return f"{self.config.base_url}{TOKEN_PATH}"

    @property
    def authorize_url(self) -> str:
        return f"{self.config.base_url}{AUTHORIZE_PATH}"

    def acquire(self) -> str:
        return fetch_token(
            self.config.client_id,
            self.config.client_secret,
            self.config.base_url,
            session=self.session,
        )

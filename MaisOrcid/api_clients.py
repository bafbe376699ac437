from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from .auth import TokenProvider
from .config import MAIS_API_PREFIX, USERS_PATH, USERS_SCOPE
from .exceptions import ALL_API_ERRORS, InvalidArgumentError, UpstreamPayloadError
from .http_utils import Connection
from .id_utils import orcidid_without_uri
from .log_utils import logger, LogSource, LogCategory
from .models import ClientConfig, OrcidUser, PageLinks
from .response_utils import decode_response


def _check_positive(name: str, value: Optional[int]):
    # bool is an int subclass, but limit=True is never what the caller meant
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")


def first_page(page_size: Optional[int] = None) -> str:
    """
    Path of the first page of the users collection.
    """
    path = f"{USERS_PATH}?scope={USERS_SCOPE}"
    if page_size:
        path += f"&page_size={page_size}"
    return path


class MaisOrcidClient:
    """
    Client for the MAIS ORCID User API, which records which institutional
    users (by SUNet ID) have linked an ORCID iD and what they authorized.

    The connection is built on the first request and reused afterwards; when
    one is passed in, it is used as-is and no token is requested.
    """

    def __init__(
            self,
            config: ClientConfig,
            connection: Optional[Any] = None,
            token_provider: Optional[TokenProvider] = None,
    ):
        self.config = config
        self.token_provider = token_provider or TokenProvider(config)
        self._conn = connection
        self._conn_lock = threading.Lock()

    @classmethod
    def from_credentials(cls, client_id: str, client_secret: str, base_url: str) -> MaisOrcidClient:
        return cls(ClientConfig(client_id=client_id, client_secret=client_secret, base_url=base_url))

    @property
    def conn(self):
        """
        The authenticated connection, created (and a token fetched) at most once per client.
        """
        if self._conn is None:
            with self._conn_lock:
                if self._conn is None:
                    logger.step("Opening MAIS connection", source=LogSource.MAIS, category=LogCategory.AUTH)
                    self._conn = Connection(self.config.base_url, authorization=self.token_provider.acquire())
        return self._conn

    def fetch_orcid_users(self, limit: Optional[int] = None, page_size: Optional[int] = None) -> List[OrcidUser]:
        """
        Walk the users collection page by page and return the users in the
        order the API delivers them.

        Stops once `limit` users were collected, even in the middle of a
        page, or after the page whose self link equals its last link.
        """
        _check_positive("limit", limit)
        _check_positive("page_size", page_size)

        orcid_users: List[OrcidUser] = []
        next_page = first_page(page_size)
        page_number = 0
        while True:
            page_number += 1
            response = self._get_response(next_page)
            for result in response.get("results") or []:
                orcid_users.append(OrcidUser.from_result(result))
                if limit and len(orcid_users) == limit:
                    logger.info(f"Limit of {limit} user(s) reached on page {page_number}",
                                source=LogSource.MAIS, category=LogCategory.PAGE)
                    return orcid_users

            links = PageLinks.from_links(response.get("links"))
            logger.debug(f"Page {page_number} read, {len(orcid_users)} user(s) so far",
                         source=LogSource.MAIS, category=LogCategory.PAGE)
            if links.is_last:
                logger.success(f"Fetched {len(orcid_users)} user(s) in {page_number} page(s)",
                               source=LogSource.MAIS, category=LogCategory.FETCH)
                return orcid_users
            if not links.next_link:
                raise UpstreamPayloadError(
                    repr(links), f"UIT MAIS ORCID User API page {page_number} is not the last one but has no next link"
                )
            next_page = links.next_link

    def fetch_orcid_user(self, sunetid: Optional[str] = None, orcidid: Optional[str] = None) -> Optional[OrcidUser]:
        """
        Look up one user by SUNet ID or by ORCID iD. The SUNet ID wins when
        both are given. An ORCID iD may be a full URI; only the bare iD is sent.

        Returns None when the user is unknown.
        """
        if not sunetid and not orcidid:
            raise InvalidArgumentError("must provide either a sunetid or orcidid")

        if sunetid:
            return self._fetch_by_sunetid(sunetid)
        return self._fetch_by_orcidid(orcidid)

    def _fetch_by_sunetid(self, sunetid: str) -> Optional[OrcidUser]:
        result = self._get_response(f"{USERS_PATH}/{sunetid}", allow_404=True)
        if result is None:
            logger.info(f"No ORCID user for SUNet ID {sunetid}", source=LogSource.MAIS, category=LogCategory.LOOKUP)
            return None
        return OrcidUser.from_result(result)

    def _fetch_by_orcidid(self, orcidid: str) -> Optional[OrcidUser]:
        bare_orcidid = orcidid_without_uri(orcidid)
        if not bare_orcidid:
            logger.info(f"Not an ORCID iD, lookup skipped: {orcidid!r}",
                        source=LogSource.MAIS, category=LogCategory.SKIP)
            return None

        result = self._get_response(f"{USERS_PATH}/{bare_orcidid}", allow_404=True)
        if result is None:
            logger.info(f"No ORCID user for {bare_orcidid}", source=LogSource.MAIS, category=LogCategory.LOOKUP)
            return None
        return OrcidUser.from_result(result)

    def _get_response(self, path: str, allow_404: bool = False) -> Optional[Dict[str, Any]]:
        try:
            response = self.conn.get(f"{MAIS_API_PREFIX}{path}")
            return decode_response(response, allow_404=allow_404)
        except ALL_API_ERRORS as e:
            logger.error(f"{path}: {e}", source=LogSource.MAIS, category=LogCategory.ERROR)
            raise


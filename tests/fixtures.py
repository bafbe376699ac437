from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from MaisOrcid.config import MAIS_API_PREFIX
from MaisOrcid.http_utils import HttpResponse
from MaisOrcid.models import ClientConfig

BASE_URL = "https://mais.example.edu"

TEST_CONFIG = ClientConfig(client_id="sul-pub", client_secret="s3cret", base_url=BASE_URL)


def user_result(sunet_id: str, orcid_id: Optional[str] = None,
                scope: str = "/read-limited /activities/update") -> Dict[str, Any]:
    """
    One user record shaped like the MAIS API returns it.
    """
    return {
        "sunet_id": sunet_id,
        "orcid_id": orcid_id,
        "scope": scope,
        "access_token": f"token-{sunet_id}",
        "last_updated": "2024-01-17T21:18:49.000Z",
    }


def users_page(results: List[Dict[str, Any]], self_link: str, next_link: str, last_link: str) -> HttpResponse:
    body = {
        "results": results,
        "links": {"self": self_link, "next": next_link, "last": last_link},
    }
    return HttpResponse(200, json.dumps(body))


def json_response(body: Any, status: int = 200) -> HttpResponse:
    return HttpResponse(status, json.dumps(body))


class FakeConnection:
    """
    Stand-in for the HTTP connection: answers GETs from a path -> response
    map and records every path that was requested.
    """

    def __init__(self, responses: Dict[str, HttpResponse]):
        self.responses = {f"{MAIS_API_PREFIX}{path}": resp for path, resp in responses.items()}
        self.requested: List[str] = []

    def get(self, path: str) -> HttpResponse:
        self.requested.append(path)
        if path not in self.responses:
            raise AssertionError(f"unexpected request for {path}")
        return self.responses[path]


FIRST_PAGE = "/users?scope=ANY"
SECOND_PAGE = "/users?scope=ANY&page_number=2"


def two_page_collection() -> Dict[str, HttpResponse]:
    """
    A collection of five users: three on the first page, two on the last.
    The last page still carries a next link, as the real API does.
    """
    page_one = users_page(
        [
            user_result("alice", "0000-0002-7262-6251"),
            user_result("bob", "0000-0003-1527-0030", scope="/read-limited"),
            user_result("carol", "0000-0001-5109-3700"),
        ],
        self_link=FIRST_PAGE,
        next_link=SECOND_PAGE,
        last_link=SECOND_PAGE,
    )
    page_two = users_page(
        [
            user_result("dave", "0000-0002-1825-009X"),
            user_result("erin", None, scope=""),
        ],
        self_link=SECOND_PAGE,
        next_link=SECOND_PAGE,
        last_link=SECOND_PAGE,
    )
    return {FIRST_PAGE: page_one, SECOND_PAGE: page_two}

import dataclasses

import pytest

from MaisOrcid import config
from MaisOrcid.exceptions import (
    InvalidArgumentError,
    MaisOrcidError,
    UpstreamPayloadError,
    UpstreamStatusError,
)
from MaisOrcid.http_utils import HttpResponse
from MaisOrcid.id_utils import orcidid_without_uri
from MaisOrcid.models import ClientConfig, OrcidUser, PageLinks, has_update_scope
from MaisOrcid.response_utils import decode_response
from tests.fixtures import user_result

# ===== ORCID iD NORMALIZATION =====

def test_orcidid_without_uri():
    """
    Test bare ORCID iD extraction from URIs and plain strings.
    """
    test_cases = [
        ("https://sandbox.orcid.org/0000-0002-7262-6251", "0000-0002-7262-6251"),
        ("https://orcid.org/0000-0002-7262-6251", "0000-0002-7262-6251"),
        ("http://orcid.org/0000-0002-1825-009X", "0000-0002-1825-009X"),
        ("0000-0002-7262-6251", "0000-0002-7262-6251"),
        ("orcid:0000-0003-1527-0030", "0000-0003-1527-0030"),
        # Invalid
        ("not-an-id", ""),
        ("0000-0002-7262-625", ""),
        ("0000-0002-7262-625Y", ""),
        ("0000-0002-7262-6251/works", ""),
        ("", ""),
        (None, ""),
    ]

    for input_val, expected in test_cases:
        output = orcidid_without_uri(input_val)
        assert output == expected, f"Expected '{expected}', got '{output}' for {input_val!r}"


def test_orcidid_must_be_at_end():
    assert orcidid_without_uri("0000-0002-7262-6251 ") == ""
    assert orcidid_without_uri("0000-0002-7262-6251\n") == ""


# ===== MODELS =====

def test_can_update():
    """
    Test that only the activities update scope allows updates.
    """
    test_cases = [
        ("/read-limited /activities/update", True),
        ("/read-limited,/activities/update,/person/update", True),
        ("/activities/update", True),
        ("/read-limited", False),
        ("/person/update", False),
        ("", False),
        (None, False),
    ]

    for scope, expected in test_cases:
        assert has_update_scope(scope) is expected, f"scope {scope!r}"
        assert OrcidUser(sunetid="abc", scope=scope).can_update is expected
        assert OrcidUser(sunetid="abc", scope=scope).update is expected


def test_user_from_result():
    user = OrcidUser.from_result(user_result("abc", "0000-0002-7262-6251"))

    assert user.sunetid == "abc"
    assert user.orcidid == "0000-0002-7262-6251"
    assert user.access_token == "token-abc"
    assert user.last_updated == "2024-01-17T21:18:49.000Z"


def test_user_from_partial_result():
    user = OrcidUser.from_result({"sunet_id": "abc"})

    assert user == OrcidUser(sunetid="abc")
    assert user.orcidid is None
    assert not user.can_update


def test_user_from_result_requires_sunetid():
    with pytest.raises(UpstreamPayloadError):
        OrcidUser.from_result({"orcid_id": "0000-0002-7262-6251", "access_token": "secret"})
    with pytest.raises(UpstreamPayloadError):
        OrcidUser.from_result(["abc"])


def test_user_is_immutable_and_hides_token():
    user = OrcidUser.from_result(user_result("abc"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        user.scope = "/activities/update"
    assert "token-abc" not in repr(user)


def test_page_links():
    links = PageLinks.from_links({"self": "/users?page=2", "next": "/users?page=2", "last": "/users?page=2"})
    assert links.is_last

    links = PageLinks.from_links({"self": "/users?page=1", "next": "/users?page=2", "last": "/users?page=2"})
    assert not links.is_last
    assert links.next_link == "/users?page=2"

    with pytest.raises(UpstreamPayloadError):
        PageLinks.from_links(None)


def test_client_config():
    cfg = ClientConfig(client_id="id", client_secret="secret", base_url="https://mais.example.edu/ ")

    assert cfg.base_url == "https://mais.example.edu"
    assert "secret" not in repr(cfg)


@pytest.mark.parametrize("field", ["client_id", "client_secret", "base_url"])
def test_client_config_requires_fields(field):
    values = {"client_id": "id", "client_secret": "secret", "base_url": "https://mais.example.edu"}
    values[field] = ""

    with pytest.raises(InvalidArgumentError):
        ClientConfig(**values)


# ===== RESPONSE DECODING =====

def test_decode_success():
    assert decode_response(HttpResponse(200, '{"sunet_id": "abc"}')) == {"sunet_id": "abc"}


def test_decode_404():
    assert decode_response(HttpResponse(404, "not found"), allow_404=True) is None

    with pytest.raises(UpstreamStatusError) as exc_info:
        decode_response(HttpResponse(404, "not found"))
    assert exc_info.value.status == 404


@pytest.mark.parametrize("status", [201, 204, 301, 400, 401, 403, 500, 502])
def test_decode_non_200_status(status):
    with pytest.raises(UpstreamStatusError) as exc_info:
        decode_response(HttpResponse(status, "{}"), allow_404=True)
    assert exc_info.value.status == status
    assert str(exc_info.value) == f"UIT MAIS ORCID User API returned {status}"


def test_decode_error_payload():
    body = '{"error": "invalid_token"}'

    with pytest.raises(UpstreamPayloadError) as exc_info:
        decode_response(HttpResponse(200, body))
    assert exc_info.value.body == body
    assert str(exc_info.value) == f"UIT MAIS ORCID User API returned an error: {body}"


@pytest.mark.parametrize("body", ["<html>oops</html>", "", "[1, 2]", "null"])
def test_decode_unusable_body(body):
    with pytest.raises(UpstreamPayloadError):
        decode_response(HttpResponse(200, body))


def test_error_hierarchy():
    assert issubclass(InvalidArgumentError, ValueError)
    for cls in (InvalidArgumentError, UpstreamStatusError, UpstreamPayloadError):
        assert issubclass(cls, MaisOrcidError)


# ===== CONFIGURATION =====

def test_retry_configuration():
    assert config.HTTP_MAX_RETRIES == 3
    assert config.HTTP_BACKOFF_INITIAL == 0.5
    assert config.HTTP_BACKOFF_RANDOMNESS == 0.5
    assert config.HTTP_BACKOFF_FACTOR == 2
    assert config.HTTP_OPEN_TIMEOUT < config.HTTP_TIMEOUT


def test_endpoint_configuration():
    assert config.MAIS_API_PREFIX == "/mais/orcid/v1"
    assert config.TOKEN_PATH == "/api/oauth/token"
    assert config.AUTHORIZE_PATH == "/api/oauth/authorize"

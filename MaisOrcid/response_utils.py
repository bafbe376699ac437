from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .exceptions import JSON_ERRORS, UpstreamPayloadError, UpstreamStatusError
from .http_utils import HttpResponse


def _decode_json_body(body: str) -> Dict[str, Any]:
    """
    Parse a response body that must hold a JSON object, keeping a short
    preview of the text in the error when it does not.
    """
    try:
        data = json.loads(body)
    except JSON_ERRORS as ex:
        preview = (body or "")[:256]
        raise UpstreamPayloadError(
            body, f"UIT MAIS ORCID User API returned invalid JSON: {ex}; preview={preview!r}"
        ) from ex
    if not isinstance(data, dict):
        raise UpstreamPayloadError(body, f"UIT MAIS ORCID User API returned a non-object body: {body[:256]!r}")
    return data


def decode_response(response: HttpResponse, allow_404: bool = False) -> Optional[Dict[str, Any]]:
    """
    Turn a raw API response into its decoded JSON object.

    Returns None for a 404 when allow_404 is set. Raises UpstreamStatusError
    for any other status than 200, and UpstreamPayloadError when a 200 body
    is not a JSON object or carries an "error" key.
    """
    if allow_404 and response.status == 404:
        return None

    if response.status != 200:
        raise UpstreamStatusError(response.status)

    data = _decode_json_body(response.body)
    if "error" in data:
        raise UpstreamPayloadError(response.body)

    return data

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import UPDATE_SCOPE
from .exceptions import InvalidArgumentError, UpstreamPayloadError


def has_update_scope(scope: Optional[str]) -> bool:
    """
    Tell whether a granted scope string allows us to update activities on the
    user's ORCID record.
    """
    return bool(scope) and UPDATE_SCOPE in scope


@dataclass(frozen=True)
class OrcidUser:
    """
    The link between one person's institutional identity and their ORCID
    record, as reported by the MAIS ORCID User API: who they are locally,
    their ORCID iD if they have linked one, the scopes they granted, and the
    token to act on their behalf.
    """
    sunetid: str
    orcidid: Optional[str] = None
    scope: Optional[str] = None
    access_token: Optional[str] = field(default=None, repr=False)  # sensitive, keep out of logs
    last_updated: Optional[str] = None

    @property
    def can_update(self) -> bool:
        return has_update_scope(self.scope)

    # same question, under the name the rest of the publications system uses
    update = can_update

    @classmethod
    def from_result(cls, result: Dict[str, Any]) -> OrcidUser:
        """
        Build a user from one decoded record of the API (either an item of a
        page's "results" or the body of a single-user response).
        """
        if not isinstance(result, dict) or not result.get("sunet_id"):
            keys = sorted(result) if isinstance(result, dict) else type(result).__name__
            raise UpstreamPayloadError(repr(keys), f"MAIS ORCID user record has no sunet_id (got {keys})")
        return cls(
            sunetid=result["sunet_id"],
            orcidid=result.get("orcid_id"),
            scope=result.get("scope"),
            access_token=result.get("access_token"),
            last_updated=result.get("last_updated"),
        )


@dataclass(frozen=True)
class PageLinks:
    """
    Navigation links of one page of the users collection.
    """
    self_link: Optional[str] = None
    next_link: Optional[str] = None
    last_link: Optional[str] = None

    @property
    def is_last(self) -> bool:
        # the API keeps sending "next" on the last page, so compare self with last instead
        return self.self_link == self.last_link

    @classmethod
    def from_links(cls, links: Dict[str, Any]) -> PageLinks:
        if not isinstance(links, dict):
            raise UpstreamPayloadError(repr(links), f"MAIS ORCID page has no usable links: {links!r}")
        return cls(
            self_link=links.get("self"),
            next_link=links.get("next"),
            last_link=links.get("last"),
        )


@dataclass(frozen=True)
class ClientConfig:
    """
    Credentials and location of the MAIS ORCID User API, handed to the client once at construction.
    """
    client_id: str
    client_secret: str = field(repr=False)
    base_url: str

    def __post_init__(self):
        for name in ("client_id", "client_secret", "base_url"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidArgumentError(f"{name} must be a non-empty string")
        # frozen, so go through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

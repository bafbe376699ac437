from __future__ import annotations

import re
from typing import Optional

from .config import _ORCIDID_REGEX


def orcidid_without_uri(orcidid: Optional[str]) -> str:
    """
    Reduce an ORCID iD that may carry a URI prefix, such as
    "https://sandbox.orcid.org/0000-0002-7262-6251", to the bare iD
    "0000-0002-7262-6251". The iD must sit at the very end of the input.

    Returns an empty string when no valid iD is found, which callers use as
    the signal not to bother asking the API about it.
    """
    if not orcidid:
        return ""
    m = re.search(_ORCIDID_REGEX, str(orcidid))
    return m.group(0) if m else ""

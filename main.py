from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from MaisOrcid.api_clients import MaisOrcidClient
from MaisOrcid.config import DEFAULT_KEY_FILE
from MaisOrcid.exceptions import ALL_API_ERRORS, FILE_READ_ERRORS, InvalidArgumentError
from MaisOrcid.io_utils import read_credentials
from MaisOrcid.log_utils import logger, LogSource, LogCategory


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the MAIS ORCID User API.")
    parser.add_argument("--key-file", default=DEFAULT_KEY_FILE,
                        help="file holding client id, client secret and base URL, one per line")
    parser.add_argument("--limit", type=int, default=None, help="stop after this many users")
    parser.add_argument("--page-size", type=int, default=None, help="users per page requested from the API")
    lookup = parser.add_mutually_exclusive_group()
    lookup.add_argument("--sunetid", default=None, help="look up a single user by SUNet ID")
    lookup.add_argument("--orcidid", default=None, help="look up a single user by ORCID iD or ORCID URI")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    parser.add_argument("--verbose", action="store_true", help="show debug messages")
    return parser.parse_args(argv)


def lookup_user(client: MaisOrcidClient, sunetid: Optional[str], orcidid: Optional[str]) -> int:
    """
    Look up one user and report what we know about them, returning 1 when
    the API does not know the user.
    """
    user = client.fetch_orcid_user(sunetid=sunetid, orcidid=orcidid)
    if user is None:
        logger.warn(f"User not found: {sunetid or orcidid}", source=LogSource.MAIS, category=LogCategory.LOOKUP)
        return 1
    logger.success(
        f"{user.sunetid}: orcidid={user.orcidid or 'n/a'} can_update={user.can_update} "
        f"last_updated={user.last_updated or 'n/a'}",
        source=LogSource.MAIS,
        category=LogCategory.LOOKUP,
    )
    return 0


def summarize_users(client: MaisOrcidClient, limit: Optional[int], page_size: Optional[int]) -> int:
    """
    Walk the users collection and report how many users there are and how
    many of them let us update their ORCID record.
    """
    users = client.fetch_orcid_users(limit=limit, page_size=page_size)
    updatable = sum(1 for user in users if user.can_update)
    logger.info(f"Users fetched: {len(users)}", source=LogSource.MAIS, category=LogCategory.PLAN)
    logger.info(f"Users with update scope: {updatable}", source=LogSource.MAIS, category=LogCategory.PLAN)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Load credentials, then either look up a single user or summarize the
    whole collection.

    Returns an exit code suitable for use as a command-line entry point.
    """
    args = _parse_args(argv)
    if args.verbose:
        logger.set_level(logging.DEBUG)
    if args.log_file:
        logger.set_log_file(args.log_file)

    logger.step("MAIS ORCID query started", category=LogCategory.PLAN)

    try:
        config = read_credentials(args.key_file)
        logger.success("Credentials loaded", category=LogCategory.PLAN)
    except FILE_READ_ERRORS as e:
        logger.error(f"Error reading credentials: {e}", category=LogCategory.ERROR)
        logger.close()
        return 2

    client = MaisOrcidClient(config)
    try:
        if args.sunetid or args.orcidid:
            code = lookup_user(client, args.sunetid, args.orcidid)
        else:
            code = summarize_users(client, args.limit, args.page_size)
    except (InvalidArgumentError,) + ALL_API_ERRORS as e:
        logger.error(f"MAIS ORCID query failed: {e}", source=LogSource.SYSTEM, category=LogCategory.ERROR)
        code = 2

    logger.step("MAIS ORCID query complete", category=LogCategory.PLAN)
    logger.close()
    return code


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

# all resource paths are appended to this prefix, which is appended to the base URL
MAIS_API_PREFIX = "/mais/orcid/v1"

# OAuth2 endpoints, relative to the base URL
TOKEN_PATH = "/api/oauth/token"
AUTHORIZE_PATH = "/api/oauth/authorize"

# collection endpoint; scope=ANY returns users regardless of the scopes they granted
USERS_PATH = "/users"
USERS_SCOPE = "ANY"

DEFAULT_KEY_FILE = "keys/MaisOrcid.key"

# Standard HTTP headers for API requests
USER_AGENT = "stanford-library-sul-pub"

# HTTP request configuration
# Overall timeout for a request (in seconds); paging through all users is slow on the MAIS side
HTTP_TIMEOUT = 500.0
# Timeout for establishing the connection (in seconds)
HTTP_OPEN_TIMEOUT = 10.0

# Exponential backoff configuration for retries
HTTP_MAX_RETRIES = 3          # Maximum number of retry attempts
HTTP_BACKOFF_INITIAL = 0.5    # Delay before the first retry in seconds
HTTP_BACKOFF_RANDOMNESS = 0.5  # Up to this fraction of the initial delay is added as jitter
HTTP_BACKOFF_FACTOR = 2       # Delay multiplier applied for each further retry

# only idempotent reads are retried; the token POST is never retried
HTTP_RETRY_METHODS = ("GET",)

# scope a user must have granted for us to write activities to their ORCID record
UPDATE_SCOPE = "/activities/update"

# pattern for a bare ORCID iD at the end of a string
# four groups of four characters, the last character is a digit or the checksum X
_ORCIDID_REGEX = r"\d{4}-\d{4}-\d{4}-\d{3}[\dX]\Z"

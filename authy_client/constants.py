"""
Wire-level constants and user-facing messages for the Authy client.
"""

DEFAULT_BASE_URL = "https://api.authy.com/protected/"
DEFAULT_TIMEOUT = 20
DEFAULT_USER_AGENT = "authy-python-client"

API_KEY_HEADER = "X-Authy-API-Key"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"

# The verify endpoint reports a valid token with these literal strings
VERIFY_SUCCESS_VALUE = "true"
VERIFY_TOKEN_VALID = "is valid"


class Messages:
    INVALID_CONFIG = "AUTHY: invalid configuration: {error}"
    INVALID_BASE_URL = "AUTHY: base URL {url!r} cannot be parsed"
    INVALID_PATH = "AUTHY: cannot parse relative path {path!r}"
    INVALID_BODY = "AUTHY: request body cannot be encoded as form data"
    INSUFFICIENT_USER_DATA = "AUTHY: insufficient data provided to create user"
    CREATE_NOT_SUCCESSFUL = "AUTHY: create not successful {message}"
    MISSING_TOKEN_OR_USER = "authyUserID or token not provided"
    INVALID_TOKEN = "invalid token"
    MALFORMED_RESPONSE = "error unmarshaling authy API response"
    REQUEST_FAILED = "AUTHY: request to {path} failed: {error}"

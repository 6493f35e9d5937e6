"""Domain-specific exceptions"""


class ConnectorError(Exception):
    """Base exception for a connector run"""

    code = "UNKNOWN_ERROR"


class AuthenticationFailure(ConnectorError):
    """Login refused, token missing, or account listing came back without details"""

    code = "LOGIN_FAILED"


class ServiceUnavailable(ConnectorError):
    """Nalo API returned an error or is unreachable"""

    code = "VENDOR_DOWN"

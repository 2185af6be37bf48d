"""
Error taxonomy for the Donation Hub API.

Every failure a handler can report is one of these classes. The exception
handlers installed in ``main.py`` render them as ``{"error": message}`` with
the class's HTTP status, so routes only ever ``raise``.
"""

from typing import Any, Dict


class DonationHubError(Exception):
    """Base exception for all Donation Hub errors"""

    status_code = 500
    default_message = "Something went wrong!"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


# ============================================
# Authentication & Authorization Errors
# ============================================

class Unauthenticated(DonationHubError):
    """No bearer token was presented"""

    status_code = 401
    default_message = "Access token required"


class InvalidCredential(DonationHubError):
    """Token or password was presented but did not check out"""

    status_code = 403
    default_message = "Invalid or expired token"


class InvalidSignature(InvalidCredential):
    """JWT signature or claims are invalid"""


class TokenExpired(InvalidCredential):
    """JWT token has expired"""


class Forbidden(DonationHubError):
    """Caller's role lacks the privilege for this operation"""

    status_code = 403
    default_message = "Access denied"


# ============================================
# Request Errors
# ============================================

class ValidationError(DonationHubError):
    """Input failed shape, range or enum checks"""

    status_code = 400
    default_message = "Invalid input"


class NotFound(DonationHubError):
    """No row matches the requested id"""

    status_code = 404
    default_message = "Not found"


class InternalError(DonationHubError):
    """Unexpected persistence or runtime failure"""

    status_code = 500

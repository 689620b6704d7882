# ==============================================================================
# BACKEND API ERRORS
# ==============================================================================
# Every failure of a backend call is turned into one of these exceptions by
# ApiClient. Views catch them at the route level.
# ==============================================================================

from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    The backend answered with an error status.

    Attributes:
        status: HTTP status code (0 when no response arrived)
        message: Message from the backend or a generic one
        errors: Field-keyed validation messages
    """

    def __init__(self, message: str, status: int = 0, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}


class ValidationFailed(ApiError):
    """422: the backend rejected one or more fields."""
    pass


class NotFound(ApiError):
    """404: the requested resource does not exist."""
    pass


class Unauthorized(ApiError):
    """401: the session token is missing or expired."""
    pass


class BackendUnavailable(ApiError):
    """Connection error or timeout before any response arrived."""
    pass


def normalize_field_errors(raw: Any) -> Dict[str, str]:
    """
    Collapse backend validation errors to {field: first message}.

    Laravel sends {"field": ["msg", ...]}; some endpoints send plain strings.
    """
    if not isinstance(raw, dict):
        return {}
    errors = {}
    for field_name, messages in raw.items():
        if isinstance(messages, (list, tuple)):
            if messages:
                errors[field_name] = str(messages[0])
        elif messages:
            errors[field_name] = str(messages)
    return errors

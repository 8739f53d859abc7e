# core/errors.py

from typing import Optional


# ============================================================
# Access-control error kinds
# ============================================================
class AccessControlError(Exception):
    """Base class for errors raised by the access-control core."""

    status_code = 500

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class StoreUnavailable(AccessControlError):
    """The remote store could not be reached or rejected the query."""

    status_code = 503


class NotFound(AccessControlError):
    """A principal or referenced row is missing."""

    status_code = 404


class InvalidGrant(AccessControlError):
    """Duplicate or dangling grant (team / permission / admin user)."""

    status_code = 400


class ScopeViolation(AccessControlError):
    """Access attempted outside the principal's panchayath or team."""

    status_code = 403


class DuplicateSubmission(AccessControlError):
    """The same mutating action is already in flight."""

    status_code = 409


# ============================================================
# Supabase error normalization
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST APIError carries .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation") -> AccessControlError:
    """
    Translate a Supabase error into an access-control error.
    Returns the error (doesn't raise) so the caller can re-raise with context.

    Args:
        error: The exception that occurred
        operation: Description of what failed (e.g., "Failed to grant permission")
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return InvalidGrant(f"{operation}: Record already exists", detail=error_detail)
    if "foreign key" in error_lower:
        return InvalidGrant(f"{operation}: Invalid reference", detail=error_detail)
    return StoreUnavailable(f"{operation} failed", detail=error_detail)

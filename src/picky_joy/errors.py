"""
Picky Joy - Error taxonomy.

Only AuthError and ValidationError are caller-actionable. Everything else
collapses to a generic 500 so internal state never leaks to the client;
the detail goes to the server log instead.
"""


class PickyJoyError(Exception):
    """Base error rendered by the web layer as {"error": ..., "details"?: ...}."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, details: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class AuthError(PickyJoyError):
    """Missing, malformed or rejected bearer token."""

    status_code = 401
    public_message = "Unauthorized"


class ValidationError(PickyJoyError):
    """Request body failed validation (e.g. blank message)."""

    status_code = 400
    public_message = "Invalid request"


class NotFoundError(PickyJoyError):
    status_code = 404
    public_message = "Not found"


class ConfigurationError(PickyJoyError):
    """A required external credential is not configured."""

    status_code = 500
    public_message = "Server configuration error"


class UpstreamError(PickyJoyError):
    """Supabase or OpenAI call failed. Callers only ever see the generic message."""

    status_code = 500
    public_message = "Failed to process chat request"

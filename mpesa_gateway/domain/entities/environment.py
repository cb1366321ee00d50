"""Gateway environment selector and its endpoints."""

from enum import Enum


class Environment(str, Enum):
    """Daraja deployment the client talks to."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        """Root URL for business endpoints."""
        if self is Environment.PRODUCTION:
            return "https://api.safaricom.co.ke"
        return "https://sandbox.safaricom.co.ke"

    @property
    def auth_url(self) -> str:
        """OAuth client-credentials endpoint."""
        return f"{self.base_url}/oauth/v1/generate?grant_type=client_credentials"

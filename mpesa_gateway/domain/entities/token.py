"""Access token entity for the OAuth bearer credential."""

from dataclasses import dataclass

# Tokens are refreshed this many seconds before the gateway expires them.
EXPIRY_MARGIN_SECONDS = 60


@dataclass(frozen=True)
class AccessToken:
    """
    Immutable bearer token with its local expiry instant.

    Attributes:
        value: The bearer token string
        expires_at: Epoch seconds after which the token must be refreshed
    """

    value: str
    expires_at: float

    @classmethod
    def issue(cls, value: str, expires_in: int, now: float) -> "AccessToken":
        """Build a token from a gateway response issued at ``now``."""
        return cls(value=value, expires_at=now + expires_in - EXPIRY_MARGIN_SECONDS)

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at

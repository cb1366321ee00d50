"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

# (password, certificate bytes) -> base64 ciphertext
CredentialEncryptor = Callable[[str, bytes], str]


class AccessTokenProvider(ABC):
    """
    Abstract source of OAuth bearer tokens for the gateway.
    """

    @abstractmethod
    async def get_token(self) -> str:
        """
        Return a bearer token that is valid right now.

        Raises:
            AuthError: If the gateway rejects the client credentials
            ApiTimeoutError: If the credential exchange times out
        """
        ...


class GatewayDispatcher(ABC):
    """
    Abstract transport for signed business requests.
    """

    @abstractmethod
    async def send(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a request body to a gateway endpoint.

        Args:
            path: Endpoint path, e.g. ``/mpesa/stkpush/v1/processrequest``
            body: Gateway request fields (names fixed by the gateway)

        Returns:
            The parsed JSON response body

        Raises:
            ApiError: If the gateway rejects or fails the request
            AuthError: If a token could not be obtained

        Note:
            Implementations are responsible for retries with backoff.
        """
        ...

"""
Domain Interfaces (Ports)
"""

from .clients import AccessTokenProvider, CredentialEncryptor, GatewayDispatcher

__all__ = [
    "AccessTokenProvider",
    "CredentialEncryptor",
    "GatewayDispatcher",
]

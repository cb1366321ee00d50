"""Application services - gateway use case orchestration."""

from .mpesa_client import MpesaClient

__all__ = [
    "MpesaClient",
]

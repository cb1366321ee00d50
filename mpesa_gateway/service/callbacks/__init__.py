"""
Callback normalization for gateway webhooks
"""

from .parser import (
    ACCEPTED_ACK,
    parse_async_result,
    parse_c2b_confirmation,
    parse_stk_callback,
)
from .network import GATEWAY_IP_PREFIXES, is_gateway_ip, resolve_client_ip

__all__ = [
    "ACCEPTED_ACK",
    "parse_stk_callback",
    "parse_async_result",
    "parse_c2b_confirmation",
    "GATEWAY_IP_PREFIXES",
    "is_gateway_ip",
    "resolve_client_ip",
]

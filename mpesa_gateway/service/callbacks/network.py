"""Gateway egress IP allow-list for webhook requests."""

from typing import Collection, Optional

# Safaricom publishes its callback egress addresses within these ranges.
GATEWAY_IP_PREFIXES = (
    "196.201.214.",
    "196.201.213.",
    "196.201.212.",
)

_IPV4_MAPPED_PREFIX = "::ffff:"


def is_gateway_ip(ip: Optional[str]) -> bool:
    """Return True if ``ip`` belongs to a known gateway egress range."""
    if not ip:
        return False
    ip = ip.strip().lower()
    if ip.startswith(_IPV4_MAPPED_PREFIX):
        ip = ip[len(_IPV4_MAPPED_PREFIX):]
    return ip.startswith(GATEWAY_IP_PREFIXES)


def resolve_client_ip(
    peer: Optional[str],
    forwarded_for: Optional[str],
    trusted_proxies: Collection[str] = (),
) -> Optional[str]:
    """
    Address of the original caller.

    ``X-Forwarded-For`` is only honoured when the direct peer is a trusted
    proxy. Hops are read right to left, skipping trusted proxies, so a
    client cannot spoof its address by prepending entries.
    """
    if not forwarded_for or peer not in trusted_proxies:
        return peer

    ip = peer
    for hop in reversed(forwarded_for.split(",")):
        hop = hop.strip()
        if not hop:
            continue
        ip = hop
        if hop not in trusted_proxies:
            break
    return ip

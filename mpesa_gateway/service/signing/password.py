"""Lipa Na M-Pesa Online password derivation."""

import base64


def generate_password(short_code: str, pass_key: str, timestamp: str) -> str:
    """
    Derive the STK push password.

    Formula: Base64(ShortCode + PassKey + Timestamp), no separators.
    """
    raw = f"{short_code}{pass_key}{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")

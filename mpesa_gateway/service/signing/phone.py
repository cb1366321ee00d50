"""
Phone number normalization for gateway requests.

The gateway only accepts Kenyan MSISDNs in the 12-digit international
form ``2547XXXXXXXX``. Any other length is rejected before sending.
"""

import re

from mpesa_gateway.domain.exceptions import ValidationError

COUNTRY_CODE = "254"
TRUNK_PREFIX = "0"
MSISDN_LENGTH = 12

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: str) -> str:
    """
    Convert a Kenyan phone number to ``254XXXXXXXXX``.

    Accepts ``0712345678``, ``+254712345678``, ``254712345678``,
    ``712345678``, with or without spaces, dashes or parentheses.

    Raises:
        ValidationError: If the cleaned number is not exactly 12 digits
    """
    cleaned = _NON_DIGITS.sub("", value or "")

    if cleaned.startswith(TRUNK_PREFIX):
        cleaned = COUNTRY_CODE + cleaned[len(TRUNK_PREFIX):]
    elif not cleaned.startswith(COUNTRY_CODE):
        cleaned = COUNTRY_CODE + cleaned

    if len(cleaned) != MSISDN_LENGTH:
        raise ValidationError(
            f'Invalid phone number "{value}": expected {MSISDN_LENGTH} digits '
            f"after formatting, got {len(cleaned)} ({cleaned})",
            field="phone_number",
        )

    return cleaned

"""
Request signing and formatting helpers for the Daraja API
"""

from .phone import normalize_phone
from .timestamps import generate_timestamp, parse_gateway_date
from .password import generate_password
from .credential import default_certificate, encrypt_credential, load_certificate

__all__ = [
    "normalize_phone",
    "generate_timestamp",
    "parse_gateway_date",
    "generate_password",
    "encrypt_credential",
    "default_certificate",
    "load_certificate",
]

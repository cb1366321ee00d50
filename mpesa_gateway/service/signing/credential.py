"""
Initiator security credential generation.

Money-movement and query operations require the initiator password
encrypted with the public key from the gateway's X.509 certificate,
using RSA PKCS#1 v1.5 padding, then base64 encoded.

When no certificate is configured, the public certificate bundled for
the target environment is used. Errors are not wrapped: an unreadable
certificate surfaces as the underlying OSError and a malformed one as
the cryptography error.
"""

import base64
from importlib import resources
from pathlib import Path
from typing import Union

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import padding

PEM_MARKER = b"-----BEGIN"

CERTIFICATE_ROOT = resources.files(__package__) / "certificates"
DEFAULT_CERTIFICATES = {
    "sandbox": "sandbox.cer",
    "production": "production.cer",
}


def load_certificate(path: Union[str, Path]) -> bytes:
    """Read certificate bytes (PEM or DER) from disk."""
    return Path(path).read_bytes()


def default_certificate(environment: str) -> bytes:
    """Read the gateway certificate bundled for ``environment``."""
    return (CERTIFICATE_ROOT / DEFAULT_CERTIFICATES[environment]).read_bytes()


def encrypt_credential(password: str, certificate: bytes) -> str:
    """
    Encrypt an initiator password with the certificate's RSA public key.

    Args:
        password: Plain initiator password
        certificate: X.509 certificate, PEM or DER encoded

    Returns:
        Base64-encoded ciphertext for the SecurityCredential field
    """
    if certificate.lstrip().startswith(PEM_MARKER):
        cert = x509.load_pem_x509_certificate(certificate)
    else:
        cert = x509.load_der_x509_certificate(certificate)

    ciphertext = cert.public_key().encrypt(
        password.encode("utf-8"),
        padding.PKCS1v15(),
    )
    return base64.b64encode(ciphertext).decode("ascii")

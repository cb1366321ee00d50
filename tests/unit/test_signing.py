"""
Unit Tests for request signing and formatting.

These tests verify:
1. Phone number normalization across the accepted input forms
2. Timestamp formatting and gateway date parsing
3. STK password derivation
4. Initiator credential encryption with an X.509 certificate
"""

import base64
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from mpesa_gateway.domain.exceptions import ErrorKind, ValidationError
from mpesa_gateway.service.signing import (
    encrypt_credential,
    generate_password,
    generate_timestamp,
    load_certificate,
    normalize_phone,
    parse_gateway_date,
)


# =============================================================================
# Phone Normalization Tests
# =============================================================================

class TestNormalizePhone:
    """Tests for normalize_phone."""

    @pytest.mark.parametrize(
        "value",
        [
            "0712345678",
            "+254712345678",
            "254712345678",
            "712345678",
            "0712 345 678",
            "+254-712-345-678",
            "(0712) 345678",
        ],
    )
    def test_accepted_forms_normalize_to_msisdn(self, value):
        assert normalize_phone(value) == "254712345678"

    def test_safaricom_one_prefix(self):
        assert normalize_phone("0110123456") == "254110123456"

    def test_short_number_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_phone("071234")

        exc = exc_info.value
        assert exc.kind == ErrorKind.VALIDATION
        assert exc.field == "phone_number"
        assert exc.message == (
            'Invalid phone number "071234": expected 12 digits after '
            "formatting, got 8 (25471234)"
        )

    def test_empty_number_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_phone("")

        assert "got 3 (254)" in exc_info.value.message

    def test_too_long_number_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_phone("07123456789")


# =============================================================================
# Timestamp Tests
# =============================================================================

class TestTimestamps:
    """Tests for timestamp formatting and parsing."""

    def test_generate_timestamp_format(self):
        now = datetime(2026, 2, 5, 9, 3, 7)
        assert generate_timestamp(now) == "20260205090307"

    def test_generate_timestamp_defaults_to_now(self):
        value = generate_timestamp()
        assert len(value) == 14
        assert value.isdigit()

    def test_parse_gateway_date_from_string(self):
        assert parse_gateway_date("20260225120000") == datetime(2026, 2, 25, 12, 0, 0)

    def test_parse_gateway_date_from_number(self):
        assert parse_gateway_date(20191219102115) == datetime(2019, 12, 19, 10, 21, 15)

    def test_timestamp_round_trips_through_parser(self):
        now = datetime(2026, 12, 31, 23, 59, 59)
        assert parse_gateway_date(generate_timestamp(now)) == now


# =============================================================================
# Password Tests
# =============================================================================

class TestGeneratePassword:
    """Tests for the STK push password."""

    def test_password_is_base64_of_concatenation(self):
        password = generate_password("174379", "passkey", "20260101000000")

        assert base64.b64decode(password).decode() == "174379passkey20260101000000"

    def test_known_sandbox_value(self):
        expected = base64.b64encode(b"174379abc20240101120000").decode()
        assert generate_password("174379", "abc", "20240101120000") == expected


# =============================================================================
# Credential Encryption Tests
# =============================================================================

@pytest.fixture(scope="module")
def key_pair():
    """RSA private key and a self-signed certificate wrapping its public key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "sandbox.test")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return key, cert


class TestEncryptCredential:
    """Tests for initiator security credential encryption."""

    def test_pem_certificate(self, key_pair):
        key, cert = key_pair
        pem = cert.public_bytes(serialization.Encoding.PEM)

        credential = encrypt_credential("Safaricom999!*!", pem)

        plaintext = key.decrypt(base64.b64decode(credential), padding.PKCS1v15())
        assert plaintext == b"Safaricom999!*!"

    def test_der_certificate(self, key_pair):
        key, cert = key_pair
        der = cert.public_bytes(serialization.Encoding.DER)

        credential = encrypt_credential("secret", der)

        assert key.decrypt(base64.b64decode(credential), padding.PKCS1v15()) == b"secret"

    def test_ciphertext_differs_per_call(self, key_pair):
        _, cert = key_pair
        pem = cert.public_bytes(serialization.Encoding.PEM)

        assert encrypt_credential("secret", pem) != encrypt_credential("secret", pem)

    def test_load_certificate_from_disk(self, key_pair, tmp_path):
        key, cert = key_pair
        path = tmp_path / "gateway.cer"
        path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))

        credential = encrypt_credential("secret", load_certificate(path))

        assert key.decrypt(base64.b64decode(credential), padding.PKCS1v15()) == b"secret"

    def test_missing_certificate_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_certificate(tmp_path / "missing.cer")

    def test_garbage_certificate_raises(self):
        with pytest.raises(ValueError):
            encrypt_credential("secret", b"not a certificate")

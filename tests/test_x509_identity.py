import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from certledger.errors import AccessDenied, IdentityUnavailable
from certledger.identity import ATTRIBUTE_EXTENSION_OID, X509Identity, check_role


def make_cert_pem(attrs=None, raw_extension=None) -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Org1"),
        x509.NameAttribute(NameOID.COMMON_NAME, "user1"),
    ])
    issuer = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Org1"),
        x509.NameAttribute(NameOID.COMMON_NAME, "ca.org1"),
    ])
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=1))
        .not_valid_after(now + timedelta(days=1))
    )
    value = raw_extension
    if value is None and attrs is not None:
        value = json.dumps({"attrs": attrs}).encode()
    if value is not None:
        builder = builder.add_extension(
            x509.UnrecognizedExtension(ATTRIBUTE_EXTENSION_OID, value), critical=False
        )
    cert = builder.sign(key, hashes.SHA256())
    return cert.public_bytes(serialization.Encoding.PEM)


def test_identity_id_format():
    ident = X509Identity.from_pem(make_cert_pem({"role": "admin"}))
    decoded = base64.b64decode(ident.get_id()).decode()
    assert decoded == "x509::CN=user1,O=Org1::CN=ca.org1,O=Org1"


def test_role_attribute_read_and_checked():
    ident = X509Identity.from_pem(make_cert_pem({"role": "certifier", "hf.EnrollmentID": "user1"}))
    assert ident.get_attribute_value("role") == ("certifier", True)
    assert check_role(ident, "certifier") == ident.get_id()
    with pytest.raises(AccessDenied):
        check_role(ident, "admin")


def test_certificate_without_attributes():
    ident = X509Identity.from_pem(make_cert_pem())
    assert ident.get_attribute_value("role") == ("", False)


def test_malformed_attribute_extension():
    ident = X509Identity.from_pem(make_cert_pem(raw_extension=b"not json"))
    with pytest.raises(IdentityUnavailable):
        ident.get_attribute_value("role")


def test_bad_pem():
    with pytest.raises(IdentityUnavailable):
        X509Identity.from_pem("-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n")

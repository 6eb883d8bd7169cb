import datetime

import pytest
from asn1crypto import keys as asn1_keys
from asn1crypto import pem as asn1_pem
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID, ObjectIdentifier

from masterlist.extract import load_certificate

NOT_BEFORE = datetime.datetime(2020, 1, 1, tzinfo=datetime.timezone.utc)
NOT_AFTER = datetime.datetime(2030, 1, 1, tzinfo=datetime.timezone.utc)
NOT_BEFORE_EPOCH = 1577836800
NOT_AFTER_EPOCH = 1893456000

P256_OID_BODY = bytes.fromhex("2a8648ce3d030107")


def pkup_der(not_before=None, not_after=None):
    value = {}
    if not_before is not None:
        value["not_before"] = not_before
    if not_after is not None:
        value["not_after"] = not_after
    return asn1_x509.PrivateKeyUsagePeriod(value).dump()


def ec_point(public_key):
    return public_key.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint)


def spki_of(public_key):
    der = public_key.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    return asn1_keys.PublicKeyInfo.load(der)


def ec_spki_without_parameters(point):
    algorithm = bytes.fromhex("300906072a8648ce3d0201")
    bit_string = b"\x03" + bytes([len(point) + 1]) + b"\x00" + point
    body = algorithm + bit_string
    return asn1_keys.PublicKeyInfo.load(b"\x30" + bytes([len(body)]) + body)


def to_asn1(pem_bytes):
    _type, _headers, der_bytes = asn1_pem.unarmor(pem_bytes)
    return load_certificate(der_bytes)


def to_pem(cert):
    return asn1_pem.armor("CERTIFICATE", cert.dump(force=True))


@pytest.fixture(scope="session")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def make_cert(signing_key):
    """Factory returning PEM bytes of a certificate for the given subject public key."""
    def _make(public_key, country="DE", serial=1, aki=None, pkup=None):
        attributes = []
        if country is not None:
            attributes.append(x509.NameAttribute(NameOID.COUNTRY_NAME, country))
        attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, "CSCA test"))
        name = x509.Name(attributes)
        builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(public_key)
            .serial_number(serial)
            .not_valid_before(NOT_BEFORE)
            .not_valid_after(NOT_AFTER)
        )
        if aki is not None:
            builder = builder.add_extension(x509.AuthorityKeyIdentifier(aki, None, None), critical=False)
        if pkup is not None:
            builder = builder.add_extension(
                x509.UnrecognizedExtension(ObjectIdentifier("2.5.29.16"), pkup), critical=False
            )
        cert = builder.sign(signing_key, hashes.SHA256())
        return cert.public_bytes(serialization.Encoding.PEM)
    return _make

"""
masterlist/extract.py

Per-certificate field extraction.

Takes one asn1crypto Certificate and produces the CertificateRecord that goes
into the masterlist, or None when the certificate carries no usable key.
Optional fields that fail to decode are left empty:
- issuing country falls back to "Unknown"
- authority key identifier and private key usage period fall back to None
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from asn1crypto import core, x509

from .fallible import attempt, pipe
from .keys import normalize_public_key
from .pkup import PKUP_OID, PrivateKeyUsagePeriod, parse_private_key_usage_period, to_epoch

AKI_OID = "2.5.29.35"
UNKNOWN_COUNTRY = "Unknown"

SIGNATURE_ALGORITHMS = MappingProxyType({
    "1.2.840.113549.1.1.5": "sha1-with-rsa-signature",
    "1.2.840.113549.1.1.11": "sha256WithRSAEncryption",
    "1.2.840.113549.1.1.12": "sha384WithRSAEncryption",
    "1.2.840.113549.1.1.13": "sha512WithRSAEncryption",
    "1.2.840.113549.1.1.10": "rsassa-pss",
    "1.2.840.10045.4.1": "ecdsa-with-SHA1",
    "1.2.840.10045.4.3.2": "ecdsa-with-SHA256",
    "1.2.840.10045.4.3.3": "ecdsa-with-SHA384",
    "1.2.840.10045.4.3.4": "ecdsa-with-SHA512",
})


@dataclass(frozen=True)
class CertificateRecord:
    public_key: bytes
    signature_algorithm: str
    parameters: bytes
    issuing_country: str
    not_before: int
    not_after: int
    key_size_bits: int
    authority_key_identifier: Optional[bytes] = None
    private_key_usage_period: Optional[PrivateKeyUsagePeriod] = None

    def to_json(self):
        aki = self.authority_key_identifier
        pkup = self.private_key_usage_period
        return {
            "signature_algorithm": self.signature_algorithm,
            "public_key": list(self.public_key),
            "parameters": list(self.parameters),
            "issuing_country": self.issuing_country.upper(),
            "validity": {
                "not_before": self.not_before,
                "not_after": self.not_after,
            },
            "key_size": self.key_size_bits,
            "authority_key_identifier": aki.hex() if aki is not None else None,
            "private_key_usage_period": {
                "not_before": pkup.not_before,
                "not_after": pkup.not_after,
            } if pkup is not None else None,
        }


def load_certificate(der_bytes):
    """
    Decode DER bytes as an X.509 certificate.

    asn1crypto parses lazily, so the fields the extractor depends on are
    touched here to reject undecodable blocks up front.
    """
    cert = x509.Certificate.load(der_bytes, strict=True)
    tbs = cert["tbs_certificate"]
    _ = (
        tbs["issuer"],
        tbs["validity"],
        tbs["subject_public_key_info"],
        cert["signature_algorithm"]["algorithm"].dotted,
    )
    return cert


def signature_algorithm_name(oid):
    return SIGNATURE_ALGORITHMS.get(oid, oid)


def issuing_country(name):
    """Value of the first country attribute in an x509.Name."""
    for rdn in name.chosen:
        for attribute in rdn:
            if attribute["type"].native != "country_name":
                continue
            value = attribute["value"].native
            if not isinstance(value, str):
                return UNKNOWN_COUNTRY
            return value
    return UNKNOWN_COUNTRY


def find_extension(tbs, oid):
    """Raw value bytes of the first extension with the given dotted OID."""
    extensions = tbs["extensions"]
    if isinstance(extensions, core.Void):
        return None
    for extension in extensions:
        if extension["extn_id"].dotted == oid:
            return extension["extn_value"].contents
    return None


def key_identifier(value):
    return x509.AuthorityKeyIdentifier.load(value)["key_identifier"].native


def extract_record(cert):
    """Build a CertificateRecord from a decoded certificate, or None."""
    tbs = attempt(lambda: cert["tbs_certificate"])
    key = pipe(tbs, lambda t: t["subject_public_key_info"], normalize_public_key)
    if key is None:
        return None

    validity = pipe(tbs, lambda t: t["validity"], lambda v: (
        to_epoch(v["not_before"].native),
        to_epoch(v["not_after"].native),
    ))
    oid = attempt(lambda: cert["signature_algorithm"]["algorithm"].dotted)
    if validity is None or oid is None:
        return None

    country = pipe(tbs, lambda t: t["issuer"], issuing_country)
    aki = pipe(tbs, lambda t: find_extension(t, AKI_OID), key_identifier)
    pkup = pipe(tbs, lambda t: find_extension(t, PKUP_OID), parse_private_key_usage_period)

    return CertificateRecord(
        public_key=key.public_key,
        signature_algorithm=signature_algorithm_name(oid),
        parameters=key.parameters,
        issuing_country=UNKNOWN_COUNTRY if country is None else country,
        not_before=validity[0],
        not_after=validity[1],
        key_size_bits=key.key_size,
        authority_key_identifier=aki,
        private_key_usage_period=pkup,
    )

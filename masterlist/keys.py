"""
masterlist/keys.py

Canonical byte forms of subject public keys.

The canonical key is what the masterlist deduplicates on, so two encodings
of the same numbers must come out byte-identical:
- RSA: modulus without DER sign padding, exponent as stored
- EC: point without its one-byte format prefix, curve parameters as stored
"""
from collections import namedtuple

from asn1crypto import core

RSA_ALGORITHMS = ("rsa", "rsassa_pss")
EC_ALGORITHMS = ("ec",)

EC_UNCOMPRESSED = 0x04
EC_COMPRESSED = (0x02, 0x03)

CanonicalKey = namedtuple("CanonicalKey", ["public_key", "parameters", "key_size"])


def canonical_rsa(modulus, exponent, bit_size):
    return CanonicalKey(modulus.lstrip(b"\x00"), exponent, bit_size)


def ec_key_size(point):
    """Field size in bits implied by an encoded EC point."""
    if not point:
        return 0
    if point[0] == EC_UNCOMPRESSED:
        return (len(point) - 1) * 8 // 2
    if point[0] in EC_COMPRESSED:
        return (len(point) - 1) * 8
    return 0


def canonical_ec(point, parameters):
    if parameters is None or not point:
        return None
    return CanonicalKey(point[1:], parameters, ec_key_size(point))


def curve_parameters(spki):
    """Raw content bytes of the EC domain parameters, None if the field is missing."""
    params = spki["algorithm"]["parameters"]
    if isinstance(params, core.Void):
        return None
    return params.chosen.contents


def normalize_public_key(spki):
    """
    Turn an asn1crypto PublicKeyInfo into a CanonicalKey.

    Returns None for algorithms other than RSA and EC, and for EC keys whose
    curve parameters are absent. Decoding errors propagate.
    """
    algorithm = spki.algorithm
    if algorithm in RSA_ALGORITHMS:
        rsa_key = spki["public_key"].parsed
        modulus = rsa_key["modulus"]
        return canonical_rsa(modulus.contents, rsa_key["public_exponent"].contents, modulus.native.bit_length())
    if algorithm in EC_ALGORITHMS:
        return canonical_ec(spki["public_key"].native, curve_parameters(spki))
    return None

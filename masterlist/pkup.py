"""
masterlist/pkup.py

Decoder for the private key usage period extension (2.5.29.16).

    PrivateKeyUsagePeriod ::= SEQUENCE {
        notBefore  [0] IMPLICIT GeneralizedTime OPTIONAL,
        notAfter   [1] IMPLICIT GeneralizedTime OPTIONAL }

The TLV walk is done by hand on top of asn1crypto.parser so that one broken
timestamp only blanks that timestamp instead of the whole extension.
"""
import calendar
from collections import namedtuple

from asn1crypto import core, parser

from .fallible import attempt

PKUP_OID = "2.5.29.16"

CLASS_UNIVERSAL = 0
CLASS_CONTEXT = 2
METHOD_CONSTRUCTED = 1
TAG_SEQUENCE = 16
TAG_GENERALIZED_TIME = 24

PrivateKeyUsagePeriod = namedtuple("PrivateKeyUsagePeriod", ["not_before", "not_after"])


def to_epoch(moment):
    """Seconds since the epoch for a datetime; naive values are taken as UTC."""
    return calendar.timegm(moment.utctimetuple())


def iter_tlv(contents):
    """Yield (class_, tag, body) for every value packed back to back in contents."""
    offset = 0
    while offset < len(contents):
        length = parser.peek(contents[offset:])
        class_, _method, tag, _header, body, _trailer = parser.parse(contents[offset:offset + length])
        yield class_, tag, body
        offset += length


def generalized_time_epoch(body):
    """Decode the body of an implicitly tagged GeneralizedTime into epoch seconds."""
    value = core.GeneralizedTime.load(parser.emit(CLASS_UNIVERSAL, 0, TAG_GENERALIZED_TIME, body))
    return to_epoch(value.native)


def _decode(value):
    class_, method, tag, _header, body, _trailer = parser.parse(value)
    if (class_, method, tag) != (CLASS_UNIVERSAL, METHOD_CONSTRUCTED, TAG_SEQUENCE):
        raise ValueError("private key usage period is not a SEQUENCE")

    not_before = None
    not_after = None
    for child_class, child_tag, child_body in iter_tlv(body):
        if child_class != CLASS_CONTEXT:
            continue
        if child_tag == 0:
            not_before = attempt(generalized_time_epoch, child_body)
        elif child_tag == 1:
            not_after = attempt(generalized_time_epoch, child_body)
    return PrivateKeyUsagePeriod(not_before, not_after)


def parse_private_key_usage_period(value):
    """
    Decode the raw extension value.

    Returns a PrivateKeyUsagePeriod of optional epoch seconds, or None when
    the value is not a well-formed SEQUENCE.
    """
    return attempt(_decode, value)

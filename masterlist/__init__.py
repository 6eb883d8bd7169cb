"""Build a deduplicated JSON masterlist of public keys from X.509 certificates."""

__version__ = "0.1.0"

#!/usr/bin/env python3
"""
masterlist/collect.py

Scan certificate containers and accumulate unique records.

- a container holds zero or more concatenated PEM blocks
- a block that is not a decodable certificate is skipped
- scanning of a container stops at the first block that does not unarmor
- records are deduplicated by canonical public key across the whole run,
  the first record seen for a key wins
- one bad container never stops the run
"""
import pathlib

from asn1crypto import pem
from tqdm import tqdm

from .extract import extract_record, load_certificate
from .fallible import attempt

CERT_SUFFIX = ".cer"


class NoCertificatesFound(Exception):
    def __init__(self, path):
        super().__init__("No valid certificates found")
        self.path = path


class Session:
    """Records and seen keys for one run."""

    def __init__(self):
        self.records = []
        self.seen_keys = set()
        self.duplicates = 0

    def add(self, record):
        """Keep record unless its public key was already seen. Returns True if kept."""
        if record.public_key in self.seen_keys:
            self.duplicates += 1
            return False
        self.seen_keys.add(record.public_key)
        self.records.append(record)
        return True


def read_certificates(data):
    """Yield decoded certificates from the PEM blocks in data."""
    blocks = pem.unarmor(data, multiple=True)
    while True:
        try:
            _type, _headers, der_bytes = next(blocks)
        except (StopIteration, ValueError):
            return
        cert = attempt(load_certificate, der_bytes)
        if cert is not None:
            yield cert


def process_file(path, session):
    """
    Add the records of one container to session.

    Raises NoCertificatesFound if the file produced no record at all, even a
    duplicate one. OSError from reading the file propagates.
    """
    with open(path, "rb") as fh:
        data = fh.read()

    extracted = 0
    for cert in read_certificates(data):
        record = extract_record(cert)
        if record is None:
            continue
        extracted += 1
        session.add(record)

    if not extracted:
        raise NoCertificatesFound(path)
    return extracted


def container_files(directory):
    """.cer entries of a directory in name order."""
    return sorted(p for p in pathlib.Path(directory).iterdir() if p.suffix == CERT_SUFFIX)


def process_path(path, session):
    """
    Process a single container or every .cer container in a directory.

    Per-file failures are printed and skipped. Returns the number of files
    that failed.
    """
    path = pathlib.Path(path)
    files = container_files(path) if path.is_dir() else [path]

    failed = 0
    for p in tqdm(files, desc="Scanning certificates", disable=None):
        try:
            process_file(p, session)
        except (NoCertificatesFound, OSError) as e:
            print(f"Error parsing certificate file {p}: {e}")
            failed += 1
    return failed

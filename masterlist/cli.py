#!/usr/bin/env python3
"""
masterlist/cli.py

Usage:
  csc-masterlist <path_to_certificate_or_directory>

Writes csc-masterlist.json (or $MASTERLIST_OUTPUT, also read from .env).
"""
import argparse
import pathlib
import sys

from dotenv import load_dotenv

from .collect import Session, process_path
from .output import build_masterlist, output_path, write_masterlist


def main(argv=None):
    load_dotenv()
    p = argparse.ArgumentParser(prog="csc-masterlist", description="Build a public key masterlist from .cer files")
    p.add_argument("path", help="certificate file or directory of .cer files")
    args = p.parse_args(argv)

    path = pathlib.Path(args.path)
    if not path.is_dir() and not path.is_file():
        print(f"Error: {path} is neither a valid file nor directory")
        return 1

    session = Session()
    try:
        failed = process_path(path, session)
    except OSError as e:
        print("Failed to read", path, "-", e)
        return 1

    out_file = output_path()
    try:
        write_masterlist(build_masterlist(session.records), out_file)
    except OSError as e:
        print("Failed to write", out_file, "-", e)
        return 1

    print(f"Done. Unique certificates: {len(session.records)}, duplicates skipped: {session.duplicates}, failed files: {failed}")
    print("Results have been written to", out_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
masterlist/output.py

Sort, validate and persist the masterlist document.
"""
import json
import os
import pathlib

from jsonschema import validate

DEFAULT_OUT_FILE = "csc-masterlist.json"

_BYTES = {"type": "array", "items": {"type": "integer", "minimum": 0, "maximum": 255}}
_OPTIONAL_EPOCH = {"type": ["integer", "null"]}

MASTERLIST_SCHEMA = {
    "type": "object",
    "required": ["certificates"],
    "properties": {
        "certificates": {
            "type": "array",
            "items": {
                "type": "object",
                "required": [
                    "signature_algorithm", "public_key", "parameters", "issuing_country",
                    "validity", "key_size", "authority_key_identifier", "private_key_usage_period",
                ],
                "properties": {
                    "signature_algorithm": {"type": "string"},
                    "public_key": _BYTES,
                    "parameters": _BYTES,
                    "issuing_country": {"type": "string"},
                    "validity": {
                        "type": "object",
                        "required": ["not_before", "not_after"],
                        "properties": {
                            "not_before": {"type": "integer"},
                            "not_after": {"type": "integer"},
                        },
                    },
                    "key_size": {"type": "integer"},
                    "authority_key_identifier": {"type": ["string", "null"], "pattern": "^[0-9a-f]*$"},
                    "private_key_usage_period": {
                        "oneOf": [
                            {"type": "null"},
                            {
                                "type": "object",
                                "required": ["not_before", "not_after"],
                                "properties": {
                                    "not_before": _OPTIONAL_EPOCH,
                                    "not_after": _OPTIONAL_EPOCH,
                                },
                            },
                        ],
                    },
                },
            },
        },
    },
}


def output_path():
    return pathlib.Path(os.environ.get("MASTERLIST_OUTPUT", DEFAULT_OUT_FILE))


def sort_records(records):
    """Stable sort by upper-cased issuing country, compared byte-wise."""
    return sorted(records, key=lambda r: r.issuing_country.upper().encode("utf-8"))


def build_masterlist(records):
    return {"certificates": [r.to_json() for r in sort_records(records)]}


def write_masterlist(document, out_file):
    """Validate document and atomically replace out_file with it."""
    validate(instance=document, schema=MASTERLIST_SCHEMA)
    out_file = pathlib.Path(out_file)
    tmp_file = out_file.with_suffix(".tmp.json")
    try:
        with tmp_file.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        tmp_file.replace(out_file)
    except OSError:
        tmp_file.unlink(missing_ok=True)
        raise
    return out_file

"""
masterlist/fallible.py

Decoding helpers for fields that are allowed to be missing or broken.

A certificate that carries a malformed extension, an odd timestamp or a
non-text country should still end up in the masterlist with that field left
empty, so every such lookup goes through ``attempt`` instead of its own
try/except.
"""


def attempt(func, *args, **kwargs):
    """Call func and return its result, or None if it raised."""
    try:
        return func(*args, **kwargs)
    except Exception:
        return None


def pipe(value, *funcs):
    """
    Feed value through funcs left to right.

    Stops at the first step that raises or produces None and returns None.
    """
    for func in funcs:
        if value is None:
            return None
        value = attempt(func, value)
    return value

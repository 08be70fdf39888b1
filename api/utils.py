"""
Utility functions for the API application.

Small helpers shared by the views, the exception handler and the
authentication gate: the response envelope and strict path-id parsing.
"""


def envelope(category, message, data=None):
    """Builds the body every API response carries."""
    return {
        'category': category,
        'message': message,
        'data': data,
    }


MAX_ID = 2 ** 63 - 1


def parse_id(raw):
    """
    Parses a numeric path segment. Returns None when the value is not an
    integer, or falls outside the range of a database id, so the caller can
    decide which error to raise.
    """
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if not 1 <= value <= MAX_ID:
        return None
    return value

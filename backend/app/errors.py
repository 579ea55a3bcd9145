"""
Sendwize Compliance Engine - Errors

InputError is the only fatal condition raised by the audit engines. Bad
per-record data (missing dates, malformed addresses) is a scoring outcome.
"""
from typing import Any, Sequence


class InputError(ValueError):
    """Raised when an audit call receives malformed arguments."""
    pass


def require_list(value: Any, name: str) -> Sequence:
    """Reject anything that is not a list or tuple."""
    if not isinstance(value, (list, tuple)):
        raise InputError(f"{name} must be a list, got {type(value).__name__}")
    return value


def require_string_list(value: Any, name: str) -> Sequence[str]:
    """Reject anything that is not a list or tuple of strings."""
    require_list(value, name)
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise InputError(
                f"{name}[{index}] must be a string, got {type(item).__name__}"
            )
    return value

"""
Request Token Validation

Any user-supplied name or value that ends up in a file path or a kernel
file must be a plain token: ASCII letters, digits and underscore.
"""

import re

TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def is_valid_token(value: object) -> bool:
    """True if value is a non-empty string of [A-Za-z0-9_] only"""
    return isinstance(value, str) and TOKEN_PATTERN.fullmatch(value) is not None

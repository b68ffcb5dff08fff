"""
JSON String Escaping

Kernel files and command output are arbitrary bytes. They are rendered into
JSON replies byte for byte: quotes, backslashes and the common control
characters get their short escapes, any other byte outside printable ASCII
becomes ``\\u00xx``.
"""

_SHORT_ESCAPES = {
    0x08: "\\b",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x22: '\\"',
    0x5C: "\\\\",
}

_HEX = "0123456789abcdef"


def _escape_code(code: int) -> str:
    short = _SHORT_ESCAPES.get(code)
    if short is not None:
        return short
    if code < 0x20 or 0x7F < code <= 0xFF:
        return f"\\u00{_HEX[code >> 4]}{_HEX[code & 0xF]}"
    if code > 0xFFFF:
        # Outside the BMP: UTF-16 surrogate pair
        code -= 0x10000
        high = 0xD800 + (code >> 10)
        low = 0xDC00 + (code & 0x3FF)
        return f"\\u{high:04x}\\u{low:04x}"
    if code > 0xFF:
        return f"\\u{code:04x}"
    return chr(code)


def json_escape(data: bytes | str) -> str:
    """
    Escape text for use inside a JSON string literal (without the quotes).

    Output grows by at most a factor of six for bytes input (twelve for
    astral characters in str input), and input of any content terminates.

    Args:
        data: Raw bytes or text

    Returns:
        Escaped text, ASCII only
    """
    if isinstance(data, str):
        codes = (ord(ch) for ch in data)
    else:
        codes = iter(data)

    out: list[str] = []
    for code in codes:
        if 0x20 <= code <= 0x7F and code not in _SHORT_ESCAPES:
            out.append(chr(code))
        else:
            out.append(_escape_code(code))
    return "".join(out)


def json_quote(data: bytes | str) -> str:
    """Escape and wrap in double quotes"""
    return f'"{json_escape(data)}"'

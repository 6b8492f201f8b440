"""Decoding for bash ANSI-C quoted strings ($'...')."""

import string
from typing import Optional

# Two-character escapes with a fixed replacement
SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Escape letter -> number of hex digits that follow it
HEX_ESCAPES = {
    "x": 2,
    "u": 4,
}


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in string.hexdigits for c in text)


def _low_surrogate(text: str, start: int) -> Optional[int]:
    """Value of a \\uDC00-\\uDFFF escape at text[start], if there is one."""
    if text[start:start + 2] != "\\u":
        return None
    digits = text[start + 2:start + 6]
    if len(digits) != 4 or not _is_hex(digits):
        return None
    value = int(digits, 16)
    if 0xDC00 <= value <= 0xDFFF:
        return value
    return None


def decode_ansi_c(text: str) -> str:
    """Decode the inner text of a $'...' string into its literal value.

    Malformed \\x and \\u escapes, unpaired surrogate escapes, and any escape
    we don't know are kept as written. A trailing lone backslash is kept too.
    """
    out = []
    i = 0
    n = len(text)

    while i < n:
        c = text[i]
        if c != "\\" or i + 1 >= n:
            out.append(c)
            i += 1
            continue

        nxt = text[i + 1]
        if nxt in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt in HEX_ESCAPES:
            width = HEX_ESCAPES[nxt]
            digits = text[i + 2:i + 2 + width]
            value = int(digits, 16) if len(digits) == width and _is_hex(digits) else None
            step = 2 + width

            if value is not None and 0xD800 <= value <= 0xDFFF:
                # \u escapes are UTF-16 units; only a high+low pair is a character
                low = _low_surrogate(text, i + step) if value <= 0xDBFF else None
                if low is None:
                    value = None
                else:
                    value = 0x10000 + ((value - 0xD800) << 10) + (low - 0xDC00)
                    step += 6

            if value is None:
                out.append(c + nxt)
                i += 2
            else:
                out.append(chr(value))
                i += step
        else:
            out.append(c + nxt)
            i += 2

    return "".join(out)

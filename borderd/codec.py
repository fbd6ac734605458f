"""
borderd Parameter Codecs

Stateless conversions used for addresses, keys and PAN identifiers:
- bytes <-> lowercase ASCII hex (two characters per byte, no prefix)
- 16-bit identifiers rendered as "0x%04x"
- strtol-style numeric strings ("0x1234", "4660", "011")
"""

from typing import Optional

from .errors import ParseError


_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def hex_encode(data: bytes) -> str:
    """Render bytes as lowercase hex without separators."""
    return bytes(data).hex()


def hex_decode(text: str, capacity: int) -> bytes:
    """
    Decode an ASCII hex string.

    The whole input must be consumed: an odd digit count, any
    non-hex character, or more bytes than the destination can hold
    is a parse error. Nothing is returned on failure.

    Args:
        text: Hex string
        capacity: Destination size in bytes

    Returns:
        Decoded bytes (at most capacity)

    Raises:
        ParseError: If the input is malformed or too long
    """
    if not isinstance(text, str):
        raise ParseError("hex value must be a string")
    if len(text) % 2:
        raise ParseError(f"odd number of hex digits: {text!r}")
    if len(text) // 2 > capacity:
        raise ParseError(f"hex value longer than {capacity} bytes")
    if not _HEX_DIGITS.issuperset(text):
        raise ParseError(f"invalid hex digit in {text!r}")
    return bytes.fromhex(text)


def hex_decode_exact(text: str, length: int) -> bytes:
    """Decode hex that must produce exactly length bytes."""
    data = hex_decode(text, length)
    if len(data) != length:
        raise ParseError(f"expected {length} bytes, got {len(data)}")
    return data


def format_u16(value: int) -> str:
    """Render a 16-bit identifier as 0x + 4 lowercase hex digits."""
    return "0x%04x" % (value & 0xFFFF)


def parse_long(
    text: str,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """
    Parse a numeric string with automatic base detection.

    Accepts an optional sign, then "0x"/"0X" for hex, a leading "0"
    for octal, otherwise decimal. Trailing characters are rejected.

    Args:
        text: Numeric string
        minimum: Optional inclusive lower bound
        maximum: Optional inclusive upper bound

    Returns:
        Parsed integer

    Raises:
        ParseError: If the string is not a complete number or out of range
    """
    if not isinstance(text, str):
        raise ParseError("numeric value must be a string")

    digits = text.strip()
    sign = 1
    if digits[:1] in ("+", "-"):
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]

    if digits[:2] in ("0x", "0X"):
        base, digits = 16, digits[2:]
    elif len(digits) > 1 and digits[0] == "0":
        base, digits = 8, digits[1:]
    else:
        base = 10

    # int() would also accept "_" separators and inner whitespace
    if not digits or not (digits.isascii() and digits.isalnum()):
        raise ParseError(f"not a number: {text!r}")
    try:
        value = sign * int(digits, base)
    except ValueError:
        raise ParseError(f"not a number: {text!r}") from None

    if minimum is not None and value < minimum:
        raise ParseError(f"value {value} below {minimum}")
    if maximum is not None and value > maximum:
        raise ParseError(f"value {value} above {maximum}")
    return value

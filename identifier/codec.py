"""
Text form of an XID.

Format: 12 raw bytes = 20 chars of base32hex (0-9a-v), no padding.
The alphabet is in ASCII order, so sorting the text sorts the bytes.
"""

from core.errors import MalformedInput

RAW_LEN = 12
ENCODED_LEN = 20
ALPHABET = "0123456789abcdefghijklmnopqrstuv"

# 20 symbols carry 100 bits, 4 more than the payload
_PAD_BITS = ENCODED_LEN * 5 - RAW_LEN * 8
_PAD_MASK = (1 << _PAD_BITS) - 1

_DECODE_MAP = {char: index for index, char in enumerate(ALPHABET)}


def encode(raw):
    """Encode 12 raw bytes as a 20-character string."""
    n = int.from_bytes(raw, byteorder="big") << _PAD_BITS

    chars = []
    for _ in range(ENCODED_LEN):
        n, remainder = divmod(n, 32)
        chars.append(ALPHABET[remainder])

    return "".join(reversed(chars))


def decode(text):
    """Decode a 20-character string into 12 raw bytes."""
    if not isinstance(text, str):
        raise MalformedInput("XID must be a string", value=text, reason="type")
    if len(text) != ENCODED_LEN:
        raise MalformedInput(
            f"XID must be {ENCODED_LEN} characters, got {len(text)}",
            value=text,
            reason="length",
        )

    n = 0
    for position, char in enumerate(text):
        symbol = _DECODE_MAP.get(char)
        if symbol is None:
            raise MalformedInput(
                f"invalid character {char!r} at position {position}",
                value=text,
                reason="alphabet",
            )
        n = (n << 5) | symbol

    if n & _PAD_MASK:
        raise MalformedInput("non-zero trailing bits", value=text, reason="padding")

    return (n >> _PAD_BITS).to_bytes(RAW_LEN, byteorder="big")


def validate(text):
    """Raise MalformedInput if text is not a canonical XID string."""
    decode(text)


def is_valid(text):
    try:
        decode(text)
    except MalformedInput:
        return False
    return True

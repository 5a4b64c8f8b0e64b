from __future__ import annotations

from cachifier.core.errors import InvalidArgumentError

DEFAULT_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def encode_digest(data: bytes, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Encode ``data`` as a positional number in ``alphabet``.

    The bytes are read as one unsigned little-endian integer and digits are
    emitted least-significant first, so ``b"\\x01\\x02\\x03\\x04"`` becomes
    ``"pml241"``. A zero value yields an empty string.
    """
    if len(alphabet) < 2:
        raise InvalidArgumentError("alphabet needs at least two symbols")

    base = len(alphabet)
    value = int.from_bytes(data, "little", signed=False)
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, base)
        digits.append(alphabet[remainder])
    return "".join(digits)

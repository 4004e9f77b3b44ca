"""Word codec: 16-bit words <-> int32, float32 and packed ASCII strings. No I/O."""

import struct
from typing import Sequence

from .types import WordOrder


def to_word(value: int) -> int:
    """Truncate any integer to an unsigned 16-bit word."""
    return value & 0xFFFF


def to_signed16(value: int) -> int:
    """Convert unsigned 16-bit to signed."""
    value = to_word(value)
    if value > 0x7FFF:
        return value - 0x10000
    return value


def from_signed16(value: int) -> int:
    """Convert signed 16-bit to unsigned."""
    if value < 0:
        return value + 0x10000
    return value


def format_unsigned16(word: int) -> str:
    return str(to_word(word))


def format_signed16(word: int) -> str:
    return str(to_signed16(word))


def format_hex16(word: int) -> str:
    return f"{to_word(word):04X}"


def _combine(words: Sequence[int], order: WordOrder) -> int:
    if len(words) < 2:
        raise ValueError(f"Two words required for a 32-bit value, got {len(words)}")
    if order == WordOrder.LOW_HIGH:
        low, high = words[0], words[1]
    else:
        low, high = words[1], words[0]
    return (to_word(high) << 16) | to_word(low)


def _split(u32: int, order: WordOrder) -> list[int]:
    low = u32 & 0xFFFF
    high = (u32 >> 16) & 0xFFFF
    if order == WordOrder.LOW_HIGH:
        return [low, high]
    return [high, low]


def words_to_int32(words: Sequence[int], order: WordOrder) -> int:
    """Combine two words into a signed 32-bit integer (two's complement wraparound)."""
    (result,) = struct.unpack("<i", struct.pack("<I", _combine(words, order)))
    return result


def int32_to_words(value: int, order: WordOrder) -> list[int]:
    """Split a 32-bit integer into two words; values outside int32 wrap silently."""
    return _split(value & 0xFFFFFFFF, order)


def words_to_float32(words: Sequence[int], order: WordOrder) -> float:
    """Combine two words and reinterpret the bits as IEEE 754 single precision."""
    (result,) = struct.unpack("<f", struct.pack("<I", _combine(words, order)))
    return result


def float32_to_words(value: float, order: WordOrder) -> list[int]:
    """
    Split the IEEE 754 single precision bit pattern of value into two words.

    Raises ValueError for finite values outside the float32 range.
    """
    try:
        packed = struct.pack("<f", value)
    except OverflowError as e:
        raise ValueError(f"Value out of float32 range: {value!r}") from e
    (u32,) = struct.unpack("<I", packed)
    return _split(u32, order)


def word_count_for_bytes(length: int) -> int:
    """Words needed to hold length bytes (two bytes per word)."""
    return (length + 1) // 2


def words_to_string(words: Sequence[int], length: int, encoding: str = "ascii") -> str:
    """
    Decode words into text, high byte first within each word (0x4845 -> "HE").

    The result is cut to length bytes, then at the first NUL byte.
    """
    data = bytearray()
    for w in words:
        data.append((w >> 8) & 0xFF)
        data.append(w & 0xFF)
    data = data[: max(length, 0)]
    nul = data.find(0)
    if nul >= 0:
        data = data[:nul]
    return data.decode(encoding, errors="replace")


def string_to_words(text: str, encoding: str = "ascii") -> list[int]:
    """
    Pack text into words, high byte first; an odd final byte gets a zero low byte.

    Empty text still yields one zero word so a write command is never empty.
    """
    data = (text or "").encode(encoding, errors="replace")
    words = []
    for i in range(0, len(data), 2):
        b1 = data[i]
        b2 = data[i + 1] if i + 1 < len(data) else 0
        words.append((b1 << 8) | b2)
    if not words:
        words.append(0)
    return words

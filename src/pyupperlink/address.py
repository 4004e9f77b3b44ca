"""Parse PLC address strings (area prefix + offset + optional .U/.S/.D/.H/.L suffix)."""

from typing import Any

from .errors import AddressFormatError
from .types import Address, DataSuffix, WordKind

_SUFFIXES: dict[str, DataSuffix] = {
    "U": DataSuffix.U,
    "S": DataSuffix.S,
    "D": DataSuffix.D,
    "H": DataSuffix.H,
    "L": DataSuffix.L,
}

_WORD_KINDS: dict[str, WordKind] = {kind.value: kind for kind in WordKind if kind is not WordKind.UNKNOWN}

# Suffixes that span two consecutive words
_DOUBLE_WORD_SUFFIXES = frozenset({DataSuffix.D, DataSuffix.L})


def parse_address(raw: str) -> Address:
    """
    Parse a PLC address string into an Address.

    - Trim and upper-case the input.
    - Strip a recognized .U/.S/.D/.H/.L suffix; an unrecognized one is left in place.
    - Split the leading letters (area) from the digits (offset).
    - Unknown areas map to WordKind.UNKNOWN but keep their prefix text.

    Raises AddressFormatError for empty input, a missing area prefix, or a
    missing/non-numeric offset.
    """
    if raw is None or not raw.strip():
        raise AddressFormatError(raw or "", "Address cannot be empty")
    s = raw.strip().upper()

    data_suffix = DataSuffix.NONE
    dot = s.rfind(".")
    if 0 < dot < len(s) - 1:
        matched = _SUFFIXES.get(s[dot + 1:])
        if matched is not None:
            data_suffix = matched
            s = s[:dot]

    i = 0
    while i < len(s) and s[i].isalpha():
        i += 1
    if i == 0:
        raise AddressFormatError(raw, f"Address must start with a word type: {raw!r}")
    prefix = s[:i]
    rest = s[i:]

    if not rest or not (rest.isascii() and rest.isdigit()):
        raise AddressFormatError(raw, f"Address must contain a numeric offset: {raw!r}")

    return Address(
        word_kind=_WORD_KINDS.get(prefix, WordKind.UNKNOWN),
        area=prefix,
        offset=int(rest),
        data_suffix=data_suffix,
        raw=raw,
    )


def word_count_for(address: Address) -> int:
    """Number of words a typed read of this address covers (2 for .D/.L, else 1)."""
    return 2 if address.data_suffix in _DOUBLE_WORD_SUFFIXES else 1


def describe_address(raw: str) -> dict[str, Any]:
    """Return the parsed fields and the read command for an address; no I/O."""
    addr = parse_address(raw)
    count = word_count_for(addr)
    command = f"RD {addr.base_address}" if count == 1 else f"RDS {addr.base_address} {count}"
    return {
        "raw": addr.raw,
        "base_address": addr.base_address,
        "area": addr.area,
        "word_kind": addr.word_kind.value,
        "offset": addr.offset,
        "data_suffix": addr.data_suffix.value or None,
        "word_count": count,
        "read_command": command,
    }

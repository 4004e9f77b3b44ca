"""Core data model: memory area enum, data suffix, word order, and parsed Address."""

from dataclasses import dataclass
from enum import Enum


class WordKind(str, Enum):
    """PLC memory areas recognized by the address parser."""

    UNKNOWN = "UNKNOWN"
    DM = "DM"
    D = "D"
    MR = "MR"
    ZF = "ZF"
    HR = "HR"
    CIO = "CIO"
    LR = "LR"


class DataSuffix(str, Enum):
    """How the word(s) at an address are interpreted (the part after the dot)."""

    NONE = ""
    U = "U"  # unsigned 16-bit
    S = "S"  # signed 16-bit
    D = "D"  # signed 32-bit
    H = "H"  # 16-bit hex
    L = "L"  # signed 32-bit (long)


class WordOrder(str, Enum):
    """Placement of the two 16-bit halves of a 32-bit value."""

    LOW_HIGH = "low-high"
    HIGH_LOW = "high-low"


@dataclass(frozen=True)
class Address:
    """Parsed PLC address such as DM100, DM100.U or dm100.h."""

    word_kind: WordKind
    area: str
    offset: int
    data_suffix: DataSuffix
    raw: str

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")

    @property
    def base_address(self) -> str:
        """Suffix-free address sent on the wire (e.g. DM100.U -> DM100)."""
        return f"{self.area}{self.offset}"

    def __str__(self) -> str:
        return self.raw

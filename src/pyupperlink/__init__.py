"""pyupperlink: PLC memory read/write over the ASCII upper-link protocol (RD/RDS/WR/WRS)."""

__version__ = "0.1.0"

from .address import describe_address, parse_address
from .client import UpperLinkClient
from .errors import (
    AddressFormatError,
    LinkConnectionError,
    LinkTimeoutError,
    NotSupportedError,
    ProtocolError,
    PyUpperLinkError,
)
from .transport import UpperLinkChannel
from .types import Address, DataSuffix, WordKind, WordOrder

__all__ = [
    "__version__",
    "UpperLinkClient",
    "UpperLinkChannel",
    "AddressFormatError",
    "LinkConnectionError",
    "LinkTimeoutError",
    "NotSupportedError",
    "ProtocolError",
    "PyUpperLinkError",
    "describe_address",
    "parse_address",
    "Address",
    "DataSuffix",
    "WordKind",
    "WordOrder",
]

"""UpperLinkClient: typed read/write of PLC words over the ASCII upper-link protocol."""

import logging
from typing import Any, Sequence

from . import codec
from .address import describe_address, parse_address
from .errors import NotSupportedError, ProtocolError
from .transport import UpperLinkChannel
from .types import DataSuffix, WordOrder

logger = logging.getLogger(__name__)

# Responses starting with "E" and shorter than this are device error codes (E0, E1, ...)
ERROR_RESPONSE_MAX_LENGTH = 10


def _parse_word(token: str) -> int:
    """Parse one response token to a 16-bit word; unparsable tokens read as 0."""
    try:
        return codec.to_word(int(token))
    except ValueError:
        return 0


class UpperLinkClient:
    """
    High-level client that reads/writes PLC memory by address (e.g. DM100, DM100.H, dm200.d).
    Commands: RD, RDS, WR, WRS over a single UpperLinkChannel.

    word_order controls how two words combine into 32-bit ints and floats; it is
    read on every call and may be changed between calls.
    """

    def __init__(
        self,
        host: str,
        port: int = 8501,
        timeout: float = 5.0,
        word_order: WordOrder = WordOrder.LOW_HIGH,
        encoding: str = "ascii",
        channel: UpperLinkChannel | None = None,
    ) -> None:
        if not host:
            raise ValueError("host is required")
        self._host = host
        self._port = port
        self.timeout = timeout
        self.word_order = WordOrder(word_order)
        self.encoding = encoding
        self._channel = channel if channel is not None else UpperLinkChannel(encoding=encoding)

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def is_connected(self) -> bool:
        return self._channel.is_connected

    def connect(self) -> None:
        """Establish TCP connection to the PLC."""
        self._channel.connect(self._host, self._port, self.timeout)

    def close(self) -> None:
        """Close the TCP connection."""
        self._channel.disconnect()

    disconnect = close

    def __enter__(self) -> "UpperLinkClient":
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _send(self, command: str) -> str | None:
        return self._channel.send_command(command, self.timeout)

    def read_words(self, address: str, count: int = 1) -> list[int] | None:
        """
        Read count words starting at address (RD for one, RDS for several).

        Returns None when the PLC sends nothing back. Tokens that do not parse as
        integers read as 0; a short response yields fewer than count words.
        """
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        base = parse_address(address).base_address
        command = f"RD {base}" if count == 1 else f"RDS {base} {count}"

        resp = self._send(command)
        if not resp:
            return None
        if resp.startswith("E") and len(resp) < ERROR_RESPONSE_MAX_LENGTH:
            raise ProtocolError(f"PLC error: {resp}", command=command, response=resp)

        body = resp
        if body.startswith("OK"):
            body = body[2:].strip()
        return [_parse_word(tok) for tok in body.split()[:count]]

    def write_words(self, address: str, values: Sequence[int]) -> None:
        """Write words starting at address (WR for one, WRS for several); expects OK."""
        if not values:
            raise ValueError("values must not be empty")
        base = parse_address(address).base_address
        words = [codec.to_word(int(v)) for v in values]
        if len(words) == 1:
            command = f"WR {base} {words[0]}"
        else:
            command = f"WRS {base} {len(words)} " + " ".join(str(w) for w in words)

        resp = self._send(command)
        if resp is None or resp.strip() != "OK":
            raise ProtocolError(f"Write failed: {resp}", command=command, response=resp)

    def _read_pair(self, address: str, kind: str) -> list[int]:
        base = parse_address(address).base_address
        words = self.read_words(base, 2)
        if words is None or len(words) < 2:
            raise ProtocolError(f"Insufficient data for {kind} at {address}: {words}", command=f"RDS {base} 2")
        return words

    def read_int32(self, address: str) -> int:
        """Read two words as a signed 32-bit integer using word_order."""
        return codec.words_to_int32(self._read_pair(address, "int32"), self.word_order)

    def write_int32(self, address: str, value: int) -> None:
        base = parse_address(address).base_address
        self.write_words(base, codec.int32_to_words(value, self.word_order))

    def read_float(self, address: str) -> float:
        """Read two words as an IEEE 754 float using word_order."""
        return codec.words_to_float32(self._read_pair(address, "float"), self.word_order)

    def write_float(self, address: str, value: float) -> None:
        base = parse_address(address).base_address
        self.write_words(base, codec.float32_to_words(value, self.word_order))

    def read_string(self, address: str, length: int) -> str | None:
        """Read length bytes of packed ASCII (high byte = first char); None if no response."""
        base = parse_address(address).base_address
        words = self.read_words(base, codec.word_count_for_bytes(length))
        if words is None:
            return None
        return codec.words_to_string(words, length, self.encoding)

    def write_string(self, address: str, text: str) -> None:
        base = parse_address(address).base_address
        self.write_words(base, codec.string_to_words(text, self.encoding))

    read_ascii = read_string
    write_ascii = write_string

    def read_any(self, address: str) -> str:
        """Read address according to its suffix and render the value as text."""
        addr = parse_address(address)
        suffix = addr.data_suffix

        if suffix in (DataSuffix.NONE, DataSuffix.U):
            words = self.read_words(addr.base_address, 1)
            return codec.format_unsigned16(words[0]) if words else "0"
        if suffix == DataSuffix.S:
            words = self.read_words(addr.base_address, 1)
            return codec.format_signed16(words[0]) if words else "0"
        if suffix == DataSuffix.H:
            words = self.read_words(addr.base_address, 1)
            return codec.format_hex16(words[0]) if words else "0000"
        if suffix in (DataSuffix.D, DataSuffix.L):
            return str(self.read_int32(addr.base_address))

        raise NotSupportedError(
            f"Suffix {suffix.value!r} not supported for generic read", suffix=suffix.value
        )

    def explain(self, address: str) -> dict[str, Any]:
        """Return parsed address fields and the read command (for debugging); no I/O."""
        info = describe_address(address)
        info["word_order"] = self.word_order.value
        return info

    def __getitem__(self, address: str) -> str:
        return self.read_any(address)

    def __setitem__(self, address: str, value: int | Sequence[int]) -> None:
        if isinstance(value, int):
            value = [value]
        self.write_words(address, value)

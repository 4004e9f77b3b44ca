#!/usr/bin/env python3
"""Example: connect to a PLC and read/write a few addresses over the upper-link protocol."""

import sys

from pyupperlink import UpperLinkClient, WordOrder
from pyupperlink.errors import (
    AddressFormatError,
    LinkConnectionError,
    LinkTimeoutError,
    ProtocolError,
)


def main() -> None:
    host = "192.168.0.10"  # change to your PLC IP
    port = 8501

    try:
        with UpperLinkClient(host=host, port=port, word_order=WordOrder.LOW_HIGH) as plc:
            # Read one word, rendered by suffix
            print(f"DM100   = {plc.read_any('DM100')}")
            print(f"DM100.S = {plc.read_any('dm100.s')}")
            print(f"DM100.H = {plc.read_any('DM100.H')}")

            # 32-bit and float values span two words
            print(f"DM200.D = {plc.read_any('DM200.D')}")
            print(f"DM300 (float) = {plc.read_float('DM300')}")

            # Raw block read
            print(f"DM0..DM4 = {plc.read_words('DM0', 5)}")

            # Packed ASCII string, 10 bytes from DM400
            print(f"DM400 (str) = {plc.read_string('DM400', 10)!r}")

            # Writes (example; uncomment if your PLC allows)
            # plc.write_words("DM100", [123])
            # plc.write_int32("DM200", -2)
            # plc.write_string("DM400", "HELLO")

            # Explain an address without touching the wire
            print(f"explain(dm200.d): {plc.explain('dm200.d')}")
    except AddressFormatError as e:
        print(f"Invalid address: {e}", file=sys.stderr)
        sys.exit(1)
    except ProtocolError as e:
        print(f"PLC error: {e}", file=sys.stderr)
        sys.exit(1)
    except (LinkConnectionError, LinkTimeoutError) as e:
        print(f"Connection error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Command-line front end for pyupperlink using Typer."""

import json
import logging
from typing import Any, NoReturn, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .address import describe_address
from .client import UpperLinkClient
from .codec import from_signed16
from .errors import (
    AddressFormatError,
    LinkConnectionError,
    LinkTimeoutError,
    NotSupportedError,
    ProtocolError,
)
from .types import WordOrder

app = typer.Typer(
    name="pyupperlink",
    help="Read and write PLC memory over the ASCII upper-link protocol (RD/RDS/WR/WRS).",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

HostOption = Annotated[
    Optional[str],
    typer.Option("--host", "-h", help="PLC hostname or IP address", envvar="PYUPPERLINK_HOST"),
]
PortOption = Annotated[
    int,
    typer.Option("--port", "-p", help="Upper-link TCP port", envvar="PYUPPERLINK_PORT"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Per-operation timeout in seconds", envvar="PYUPPERLINK_TIMEOUT"),
]
WordOrderOption = Annotated[
    WordOrder,
    typer.Option("--word-order", help="Word order for 32-bit values", envvar="PYUPPERLINK_WORD_ORDER"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]
Int32Option = Annotated[
    bool,
    typer.Option("--int32", help="Treat the value as a signed 32-bit integer (two consecutive words)"),
]
FloatOption = Annotated[
    bool,
    typer.Option("--float", help="Treat the value as a 32-bit IEEE 754 float (two consecutive words)"),
]
SignedOption = Annotated[
    bool,
    typer.Option("--signed", help="Allow negative 16-bit values (-32768 to 32767)"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_client(
    host: Optional[str],
    port: int,
    timeout: float,
    word_order: WordOrder,
) -> UpperLinkClient:
    """Create and return an UpperLinkClient instance."""
    if not host:
        typer.echo("Error: --host is required for this command", err=True)
        raise typer.Exit(2)
    return UpperLinkClient(host=host, port=port, timeout=timeout, word_order=word_order)


def parse_int(value: str, signed: bool = False) -> int:
    """Parse a 16-bit integer from string, supporting hex and validation."""
    v = value.strip()
    if v.lower().startswith("0x"):
        num = int(v, 16)
    else:
        num = int(v)

    if signed:
        if not (-32768 <= num <= 32767):
            raise ValueError(f"Signed 16-bit integer out of range: {num}")
    else:
        if not (0 <= num <= 65535):
            raise ValueError(f"Unsigned 16-bit integer out of range: {num}")

    return num


def parse_int32(value: str) -> int:
    """Parse a signed 32-bit integer (decimal or 0x hex)."""
    v = value.strip()
    num = int(v, 16) if v.lower().startswith("0x") else int(v)
    if not (-(2**31) <= num <= 2**31 - 1):
        raise ValueError(f"Signed 32-bit integer out of range: {num}")
    return num


def fail(e: BaseException, verbose: bool) -> NoReturn:
    """Print an error and exit with the code for its kind."""
    if isinstance(e, AddressFormatError):
        typer.echo(f"Error: Invalid address: {e}", err=True)
        raise typer.Exit(2)
    if isinstance(e, NotSupportedError):
        typer.echo(f"Error: Not supported: {e}", err=True)
        raise typer.Exit(2)
    if isinstance(e, (LinkConnectionError, LinkTimeoutError)):
        typer.echo(f"Error: Connection error: {e}", err=True)
        raise typer.Exit(3)
    if isinstance(e, ProtocolError):
        typer.echo(f"Error: PLC error: {e}", err=True)
        raise typer.Exit(3)
    if isinstance(e, ValueError):
        typer.echo(f"Error: Invalid value: {e}", err=True)
        raise typer.Exit(2)
    typer.echo(f"Error: Unexpected error: {e}", err=True)
    if verbose:
        import traceback
        traceback.print_exception(e)
    raise typer.Exit(4)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def ping(
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
    address: Annotated[Optional[str], typer.Option("--address", "-a", help="Address to read after connecting")] = None,
) -> None:
    """
    Test connectivity to the PLC.

    Opens the TCP connection; use --address to also read one address.
    """
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    try:
        with client:
            if address:
                value = client.read_any(address)
                typer.echo(f"OK: Connected to {host}:{port}, read {address} = {value}")
            else:
                typer.echo(f"OK: Connected to {host}:{port}")
    except Exception as e:
        fail(e, verbose)


@app.command()
def info(
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show package version and settings, and optionally test connectivity.

    Without --host: shows local metadata only.
    With --host: also tests connectivity.
    """
    setup_logging(verbose)

    info_data: dict[str, Any] = {
        "version": __version__,
        "word_order": word_order.value,
        "timeout": timeout,
    }

    if host:
        try:
            with create_client(host, port, timeout, word_order):
                info_data["connectivity"] = {"status": "connected", "host": host, "port": port}
        except (LinkConnectionError, LinkTimeoutError):
            info_data["connectivity"] = {"status": "failed", "host": host, "port": port}
        except Exception as e:
            info_data["connectivity"] = {"status": "error", "error": str(e)}

    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"pyupperlink version: {info_data['version']}")
        typer.echo(f"Word order: {info_data['word_order']}")
        typer.echo(f"Timeout: {info_data['timeout']}s")
        if "connectivity" in info_data:
            status = info_data["connectivity"]["status"]
            if status == "connected":
                typer.echo(f"Connectivity: OK ({host}:{port})")
            elif status == "failed":
                typer.echo(f"Connectivity: FAILED ({host}:{port})")
            else:
                typer.echo(f"Connectivity: ERROR - {info_data['connectivity'].get('error', 'unknown')}")


@app.command()
def read(
    address: Annotated[str, typer.Argument(help="Address to read (e.g. DM100, DM100.S, DM100.H, DM100.D)")],
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
    as_float: FloatOption = False,
) -> None:
    """
    Read one address, interpreted by its suffix.

    No suffix or .U: unsigned decimal. .S: signed decimal. .H: 4-digit hex.
    .D/.L: signed 32-bit from two words. Use --float to read two words as an IEEE 754 float.
    """
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    try:
        with client:
            value: str | float = client.read_float(address) if as_float else client.read_any(address)
            if json_output:
                typer.echo(json.dumps({"address": address, "value": value}))
            else:
                typer.echo(f"{value:.6g}" if as_float else value)
    except Exception as e:
        fail(e, verbose)


@app.command(name="read-words")
def read_words(
    address: Annotated[str, typer.Argument(help="First address (e.g. DM100)")],
    count: Annotated[int, typer.Argument(help="Number of words to read", min=1)],
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
) -> None:
    """Read consecutive raw words and print them as a JSON list (null when the PLC sends nothing)."""
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    try:
        with client:
            words = client.read_words(address, count)
            typer.echo(json.dumps(words))
    except Exception as e:
        fail(e, verbose)


@app.command()
def write(
    address: Annotated[str, typer.Argument(help="Address to write (e.g. DM100)")],
    value: Annotated[str, typer.Argument(help="Value to write (decimal or 0x hex)")],
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
    signed: SignedOption = False,
    as_int32: Int32Option = False,
    as_float: FloatOption = False,
) -> None:
    """
    Write a value to one address.

    Default: one 16-bit word. --int32 and --float write two words using --word-order.
    """
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    parsed: int | float
    try:
        if as_float:
            parsed = float(value)
        elif as_int32:
            parsed = parse_int32(value)
        else:
            parsed = parse_int(value, signed)
            if signed and parsed < 0:
                parsed = from_signed16(parsed)
    except ValueError as e:
        typer.echo(f"Error: Invalid value: {e}", err=True)
        raise typer.Exit(2)

    try:
        with client:
            if as_float:
                client.write_float(address, parsed)
            elif as_int32:
                client.write_int32(address, int(parsed))
            else:
                client.write_words(address, [int(parsed)])
            typer.echo(f"OK: Wrote {address} = {value}")
    except Exception as e:
        fail(e, verbose)


@app.command(name="read-string")
def read_string(
    address: Annotated[str, typer.Argument(help="First address (e.g. DM100)")],
    length: Annotated[int, typer.Argument(help="Length in bytes", min=1)],
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """Read an ASCII string packed two characters per word."""
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    try:
        with client:
            text = client.read_string(address, length)
            if json_output:
                typer.echo(json.dumps({"address": address, "value": text}))
            else:
                typer.echo(f"'{text}'" if text is not None else "<no response>")
    except Exception as e:
        fail(e, verbose)


@app.command(name="write-string")
def write_string(
    address: Annotated[str, typer.Argument(help="First address (e.g. DM100)")],
    text: Annotated[str, typer.Argument(help="ASCII text to write")],
    host: HostOption = None,
    port: PortOption = 8501,
    timeout: TimeoutOption = 5.0,
    word_order: WordOrderOption = WordOrder.LOW_HIGH,
    verbose: VerboseOption = False,
) -> None:
    """Write an ASCII string packed two characters per word."""
    setup_logging(verbose)

    client = create_client(host, port, timeout, word_order)
    try:
        with client:
            client.write_string(address, text)
            typer.echo(f"OK: Wrote {address} = {text!r}")
    except Exception as e:
        fail(e, verbose)


@app.command()
def explain(
    address: Annotated[str, typer.Argument(help="Address to explain (e.g. dm100.h)")],
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show the parsed address and the read command it maps to.

    Does not require a connection.
    """
    setup_logging(verbose)

    try:
        info = describe_address(address)
    except Exception as e:
        fail(e, verbose)

    if json_output:
        typer.echo(json.dumps(info, indent=2))
    else:
        typer.echo(f"Base address:    {info['base_address']}")
        typer.echo(f"Word type:       {info['word_kind']}")
        typer.echo(f"Offset:          {info['offset']}")
        typer.echo(f"Suffix:          {info['data_suffix'] or '-'}")
        typer.echo(f"Words:           {info['word_count']}")
        typer.echo(f"Command:         {info['read_command']}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pyupperlink {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """pyupperlink - PLC memory access over the ASCII upper-link protocol."""
    pass


if __name__ == "__main__":
    app()

"""UpperLinkChannel: one TCP socket, CR-terminated commands, single in-flight request."""

import logging
import socket
import threading
import time
from typing import Any

from .errors import LinkConnectionError, LinkTimeoutError

logger = logging.getLogger(__name__)

COMMAND_TERMINATOR = b"\r"
RESPONSE_DELIMITERS = (0x0D, 0x0A)  # CR or LF
_RECV_SIZE = 256


class UpperLinkChannel:
    """
    Persistent TCP channel for the ASCII upper-link protocol.

    send_command() holds a lock for the whole write + read exchange, so at most
    one command is outstanding on the socket. There is no reconnect on demand:
    after a fatal I/O error the channel is disconnected and callers must call
    connect() again.
    """

    def __init__(self, encoding: str = "ascii") -> None:
        self._encoding = encoding
        self._sock: socket.socket | None = None
        self._host: str | None = None
        self._port: int | None = None
        self._lock = threading.Lock()
        # Guards _sock transitions; never held across an exchange
        self._state_lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self, host: str, port: int, timeout: float) -> None:
        """Open the TCP connection; no-op when already connected."""
        with self._state_lock:
            if self._sock is not None:
                return
            logger.debug("Connecting to %s:%s (timeout %.1fs)", host, port, timeout)
            try:
                sock = socket.create_connection((host, port), timeout=timeout)
            except OSError as e:
                raise LinkConnectionError(
                    f"Failed to connect to {host}:{port}: {e}",
                    host=host,
                    port=port,
                    cause=e,
                ) from e
            self._sock = sock
            self._host = host
            self._port = port
        logger.debug("Connected to %s:%s", host, port)

    def disconnect(self) -> None:
        """
        Close the socket; safe to call repeatedly.

        Called from another thread, this also aborts a send_command() blocked on
        the socket: it fails with LinkConnectionError and releases the channel.
        """
        self._drop(None)

    def _drop(self, expected: socket.socket | None) -> None:
        with self._state_lock:
            sock = self._sock
            if sock is None or (expected is not None and sock is not expected):
                return
            self._sock = None
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already gone or never fully connected
        try:
            sock.close()
        except OSError as e:
            logger.warning("Error closing socket to %s:%s: %s", self._host, self._port, e)
        logger.debug("Disconnected from %s:%s", self._host, self._port)

    def send_command(self, command: str, timeout: float) -> str | None:
        """
        Send one command and return the response line without its delimiter.

        Returns None when the peer closes the stream before sending anything.
        Raises LinkTimeoutError when no CR/LF arrives within timeout seconds and
        LinkConnectionError when not connected or the stream breaks mid-response.
        """
        if self._sock is None:
            raise LinkConnectionError("Not connected", host=self._host, port=self._port)

        if not self._lock.acquire(timeout=timeout):
            raise LinkTimeoutError(
                f"Timed out after {timeout}s waiting for the channel: {command!r}",
                command=command,
                timeout=timeout,
            )
        try:
            return self._exchange(command, timeout)
        finally:
            self._lock.release()

    def _exchange(self, command: str, timeout: float) -> str | None:
        sock = self._sock
        if sock is None:
            raise LinkConnectionError("Not connected", host=self._host, port=self._port)

        deadline = time.monotonic() + timeout
        data = command.encode(self._encoding, errors="replace") + COMMAND_TERMINATOR
        logger.debug("TX %s:%s %r", self._host, self._port, data)
        try:
            sock.settimeout(timeout)
            sock.sendall(data)

            buf = bytearray()
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise socket.timeout("response deadline passed")
                sock.settimeout(remaining)
                chunk = sock.recv(_RECV_SIZE)
                if self._sock is not sock:
                    raise LinkConnectionError(
                        f"Disconnected while waiting for a response to {command!r}",
                        host=self._host,
                        port=self._port,
                    )
                if not chunk:
                    if not buf:
                        logger.debug("RX %s:%s <no response>", self._host, self._port)
                        return None
                    self._drop(sock)
                    raise LinkConnectionError(
                        f"Connection closed mid-response after {len(buf)} bytes: {bytes(buf)!r}",
                        host=self._host,
                        port=self._port,
                    )
                for i, b in enumerate(chunk):
                    if b in RESPONSE_DELIMITERS:
                        # Anything after the delimiter is dropped
                        buf += chunk[:i]
                        logger.debug("RX %s:%s %r", self._host, self._port, bytes(buf))
                        return buf.decode(self._encoding, errors="replace")
                buf += chunk
        except socket.timeout as e:
            raise LinkTimeoutError(
                f"No response to {command!r} within {timeout}s",
                command=command,
                timeout=timeout,
                cause=e,
            ) from e
        except OSError as e:
            self._drop(sock)
            raise LinkConnectionError(
                f"I/O error on {self._host}:{self._port}: {e}",
                host=self._host,
                port=self._port,
                cause=e,
            ) from e

    def __enter__(self) -> "UpperLinkChannel":
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

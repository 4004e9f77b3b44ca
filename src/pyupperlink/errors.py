"""Exceptions for pyupperlink: malformed addresses, link failures and PLC error responses."""


class PyUpperLinkError(Exception):
    """Base exception for pyupperlink."""

    pass


class AddressFormatError(PyUpperLinkError):
    """Raised when an address string is malformed (missing prefix or offset)."""

    def __init__(self, address: str, message: str | None = None) -> None:
        self.address = address
        self._msg = message or f"Invalid address: {address!r}"
        super().__init__(self._msg)


class LinkConnectionError(PyUpperLinkError):
    """Raised when the TCP link cannot be opened or the peer drops it mid-response."""

    def __init__(
        self,
        message: str,
        *,
        host: str | None = None,
        port: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.cause = cause
        super().__init__(message)


class LinkTimeoutError(PyUpperLinkError):
    """Raised when no response delimiter arrives before the operation deadline."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        timeout: float | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.command = command
        self.timeout = timeout
        self.cause = cause
        super().__init__(message)


class ProtocolError(PyUpperLinkError):
    """Raised when the PLC answers, but the answer signals failure (E-code, non-OK write)."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        response: str | None = None,
    ) -> None:
        self.command = command
        self.response = response
        super().__init__(message)


class NotSupportedError(PyUpperLinkError):
    """Raised for a data suffix the generic read path does not handle."""

    def __init__(self, message: str, *, suffix: str | None = None) -> None:
        self.suffix = suffix
        super().__init__(message)

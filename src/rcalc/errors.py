"""Exception hierarchy.

Every error a caller can see carries a numeric ``code``; ``status`` is the
negated code, which is what the command line prints.
"""
from __future__ import annotations


class RcalcError(Exception):
    code = 104

    @property
    def status(self) -> int:
        return -self.code


class InvalidArgument(RcalcError, ValueError):
    code = 106


class AddressLengthError(InvalidArgument):
    code = 107


class DecodeError(InvalidArgument):
    code = 109


class TransportError(RcalcError):
    pass


class BindError(TransportError):
    code = 101


class SocketError(TransportError):
    code = 102


class SessionStateError(RcalcError):
    pass


class NotOpenError(SessionStateError):
    code = 103


class AlreadyOpenError(SessionStateError):
    code = 108


class NetworkTimeout(RcalcError, TimeoutError):
    code = 105


class UnknownServerReply(RcalcError):
    code = 104


class ServerError(RcalcError):
    """The server answered with an error packet."""

    def __init__(self, code: int):
        super().__init__(f"server reported error {code}")
        self.code = code


class DomainError(Exception):
    """Raised by an operation for operands it cannot compute."""

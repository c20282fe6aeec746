"""Status indicator collaborators.

The server reports each outcome as a single character. Writing it is a side
effect only: failures are logged and never reach the protocol.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

from .constants import DEFAULT_STATUS_DEVICE

log = logging.getLogger(__name__)


class StatusIndicator(Protocol):
    def notify(self, ch: str) -> None: ...

    def close(self) -> None: ...


class NullIndicator:
    def notify(self, ch: str) -> None:
        log.debug("status %s", ch)

    def close(self) -> None:
        pass


class DeviceIndicator:
    """Writes one byte per status to a character device such as a 7-segment display."""

    def __init__(self, path: str = DEFAULT_STATUS_DEVICE):
        self.path = path
        self._dev: BinaryIO | None = None

    def open(self) -> bool:
        try:
            self._dev = open(self.path, "wb", buffering=0)
        except OSError as exc:
            log.warning("cannot open status device %s: %s", self.path, exc)
            self._dev = None
            return False
        return True

    def notify(self, ch: str) -> None:
        if len(ch) != 1:
            raise ValueError(f"status must be a single character, got {ch!r}")
        if self._dev is None:
            return
        try:
            self._dev.write(ch.encode("ascii"))
        except OSError as exc:
            log.warning("cannot write status %r to %s: %s", ch, self.path, exc)
            self.close()

    def close(self) -> None:
        if self._dev is not None:
            self._dev.close()
            self._dev = None

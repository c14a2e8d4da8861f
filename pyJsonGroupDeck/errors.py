"""Exception types used inside the group engine.

None of these ever cross the host event boundary: each one is caught at
the component that owns the failure mode and degraded to a safe default
plus a log entry.

* :class:`DescriptorUnavailableError` — the descriptor file is missing,
  unreadable or malformed.  Caught by the descriptor resolver.
* :class:`ImageUnavailableError` — an image referenced by the descriptor
  cannot be read.  Caught by the descriptor resolver.
* :class:`CommandFailedError` — an external command exited non-zero or
  could not be spawned.  Caught by the command sequencer.
"""

from __future__ import annotations

from typing import Optional


class JsonGroupError(Exception):
    """Base class for all engine errors."""


class DescriptorUnavailableError(JsonGroupError):
    """The group descriptor could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Descriptor {path!r} unavailable: {reason}")
        self.path = path
        self.reason = reason


class ImageUnavailableError(JsonGroupError):
    """A referenced image file could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Image {path!r} unavailable: {reason}")
        self.path = path
        self.reason = reason


class CommandFailedError(JsonGroupError):
    """An external command failed.

    Attributes
    ----------
    exit_code:
        Process exit code, or ``None`` when the process could not be
        spawned at all.
    stderr:
        Captured error stream (or the spawn error message).
    """

    def __init__(self, exit_code: Optional[int], stderr: str) -> None:
        if exit_code is None:
            message = f"Command could not be started: {stderr}"
        else:
            message = f"Command exited with code {exit_code}: {stderr}"
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr

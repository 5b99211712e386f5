"""Error types raised by native-maven commands."""

from __future__ import annotations


class CommandFailure(RuntimeError):
    """User-visible command failure; the original error is kept as ``cause``."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def describe(self) -> str:
        if self.cause is None:
            return str(self)
        return f"{self}: {self.cause}"


class DescriptorParseError(RuntimeError):
    """Build descriptor is missing, unreadable or malformed."""


class DescriptorWriteError(RuntimeError):
    """Build descriptor could not be serialized or written."""


class SubprocessInvocationError(RuntimeError):
    """Subprocess could not be started."""


class SubprocessFailureError(RuntimeError):
    """Subprocess ended abnormally."""

    def __init__(self, message: str, *, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class SubprocessTimeoutError(SubprocessFailureError):
    """Subprocess exceeded its time budget and was terminated."""


class LinkError(RuntimeError):
    """External native linker failed."""

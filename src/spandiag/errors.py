from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DiagnosticsError(Exception):
    """Base class for misuse of the diagnostics API by the host program.

    These never describe the user's source code; they mean the caller is wrong.
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class InvalidDiagnostic(DiagnosticsError):
    pass


@dataclass(slots=True)
class OutOfRange(DiagnosticsError):
    file: int | None = None
    value: int | None = None

    def __str__(self) -> str:
        if self.file is None:
            return self.message
        return f"{self.message} (file {self.file}, got {self.value})"


@dataclass(slots=True)
class MalformedDiagnostic(DiagnosticsError):
    index: int | None = None  # submission index of the offending diagnostic

    def __str__(self) -> str:
        if self.index is None:
            return self.message
        return f"diagnostic #{self.index}: {self.message}"

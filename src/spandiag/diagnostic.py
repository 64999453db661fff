from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from .codes import Code
from .errors import InvalidDiagnostic
from .spans import UNSPANNED, AnySpan, Label, LabelRole, Span


class Severity(IntEnum):
    NOTE = 0
    WARNING = 1
    ERROR = 2
    BUG = 3  # internal failure of the host program, not a user error

    @property
    def tag(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, name: str) -> "Severity":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown severity: {name!r}") from None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported problem. Built through ``Diagnostic.build(...)...finish()``."""

    severity: Severity
    message: str
    code: Code | None = None
    labels: tuple[Label, ...] = ()
    notes: tuple[str, ...] = ()
    unspanned: bool = False

    @staticmethod
    def build(severity: Severity, message: str, code: Code | None = None) -> "DiagnosticBuilder":
        return DiagnosticBuilder(severity=severity, message=message, code=code)

    @property
    def primary_label(self) -> Label | None:
        if self.unspanned:
            return None
        return next((lb for lb in self.labels if lb.is_primary), None)

    @property
    def primary_span(self) -> AnySpan:
        lb = self.primary_label
        return UNSPANNED if lb is None else lb.span

    @property
    def is_unspanned(self) -> bool:
        return self.primary_label is None


@dataclass(frozen=True, slots=True)
class DiagnosticBuilder:
    """An unfinished diagnostic.

    Every ``with_*`` call returns a new draft and leaves the receiver alone, so
    a partial draft can be handed to helpers and extended independently.
    """

    severity: Severity
    message: str
    code: Code | None = None
    labels: tuple[Label, ...] = ()
    notes: tuple[str, ...] = ()
    is_unspanned: bool = False

    def with_primary_label(self, span: Span, message: str | None = None) -> "DiagnosticBuilder":
        return self._with_label(Label(span, LabelRole.PRIMARY, message))

    def with_secondary_label(self, span: Span, message: str | None = None) -> "DiagnosticBuilder":
        return self._with_label(Label(span, LabelRole.SECONDARY, message))

    def with_note(self, text: str) -> "DiagnosticBuilder":
        return replace(self, notes=self.notes + (text,))

    def with_code(self, code: Code | None) -> "DiagnosticBuilder":
        return replace(self, code=code)

    def unspanned(self) -> "DiagnosticBuilder":
        """Mark the diagnostic as having no primary source location."""
        return replace(self, is_unspanned=True)

    def _with_label(self, label: Label) -> "DiagnosticBuilder":
        return replace(self, labels=self.labels + (label,))

    def finish(self) -> Diagnostic:
        for lb in self.labels:
            if not isinstance(lb.span, Span):
                raise InvalidDiagnostic(f"label {lb.message!r} has no source span; use unspanned() instead")
        if self.labels and not self.is_unspanned and not any(lb.is_primary for lb in self.labels):
            raise InvalidDiagnostic(f"diagnostic {self.message!r} has labels but no primary label")
        if self.is_unspanned and any(lb.is_primary for lb in self.labels):
            raise InvalidDiagnostic(f"unspanned diagnostic {self.message!r} cannot have a primary label")
        return Diagnostic(
            severity=self.severity,
            message=self.message,
            code=self.code,
            labels=self.labels,
            notes=self.notes,
            unspanned=self.is_unspanned,
        )


def error(message: str, code: Code | None = None) -> DiagnosticBuilder:
    return Diagnostic.build(Severity.ERROR, message, code)


def warning(message: str, code: Code | None = None) -> DiagnosticBuilder:
    return Diagnostic.build(Severity.WARNING, message, code)


def note(message: str, code: Code | None = None) -> DiagnosticBuilder:
    return Diagnostic.build(Severity.NOTE, message, code)


def bug(message: str, code: Code | None = None) -> DiagnosticBuilder:
    return Diagnostic.build(Severity.BUG, message, code)

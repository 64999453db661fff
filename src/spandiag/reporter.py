from __future__ import annotations

import threading

from .codes import Code
from .diagnostic import Diagnostic, Severity
from .log import get_logger
from .spans import AnySpan, Span

logger = get_logger(__name__)


class Collector:
    """Accumulates diagnostics for one compilation session.

    Producers call ``submit`` (or the ``error``/``warning``/... shorthands) and
    carry on with a placeholder result; the driver later asks
    ``has_severity_at_least`` whether to stop the pipeline. ``submit`` may be
    called from many threads at once. Rendering reads a snapshot taken with
    ``all()``; producers must be finished before that snapshot is taken.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._diagnostics: list[Diagnostic] = []
        self._counts: dict[Severity, int] = {s: 0 for s in Severity}
        self._max: Severity | None = None

    def submit(self, diagnostic: Diagnostic) -> None:
        if not isinstance(diagnostic, Diagnostic):
            raise TypeError(f"expected a finished Diagnostic, got {type(diagnostic)!r}")
        with self._lock:
            self._diagnostics.append(diagnostic)
            self._counts[diagnostic.severity] += 1
            if self._max is None or diagnostic.severity > self._max:
                self._max = diagnostic.severity
        logger.debug("%s: %s", diagnostic.severity.tag, diagnostic.message)

    def has_severity_at_least(self, severity: Severity) -> bool:
        m = self._max
        return m is not None and m >= severity

    @property
    def max_severity(self) -> Severity | None:
        return self._max

    @property
    def errored(self) -> bool:
        return self.has_severity_at_least(Severity.ERROR)

    def count(self, severity: Severity | None = None) -> int:
        with self._lock:
            if severity is None:
                return len(self._diagnostics)
            return self._counts[severity]

    def all(self) -> tuple[Diagnostic, ...]:
        with self._lock:
            return tuple(self._diagnostics)

    def __len__(self) -> int:
        return self.count()

    # Shorthands: build, finish and submit in one step. UNSPANNED gives a
    # diagnostic without a source anchor.

    def report(self, severity: Severity, span: AnySpan, message: str, code: Code | None = None) -> None:
        draft = Diagnostic.build(severity, message, code)
        if isinstance(span, Span):
            draft = draft.with_primary_label(span)
        else:
            draft = draft.unspanned()
        self.submit(draft.finish())

    def error(self, span: AnySpan, message: str, code: Code | None = None) -> None:
        self.report(Severity.ERROR, span, message, code)

    def warning(self, span: AnySpan, message: str, code: Code | None = None) -> None:
        self.report(Severity.WARNING, span, message, code)

    def note(self, span: AnySpan, message: str, code: Code | None = None) -> None:
        self.report(Severity.NOTE, span, message, code)

    def bug(self, span: AnySpan, message: str, code: Code | None = None) -> None:
        self.report(Severity.BUG, span, message, code)

    def info(self, message: str) -> None:
        """Record a position-less note."""
        self.submit(Diagnostic.build(Severity.NOTE, message).unspanned().finish())

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TextIO

from yachalk.chalk_factory import ChalkFactory
from yachalk.types import ColorMode

from .codes import code_token
from .diagnostic import Diagnostic, Severity
from .errors import MalformedDiagnostic, OutOfRange
from .log import get_logger
from .reporter import Collector
from .source_map import SourceFile, SourceMap
from .spans import FileId, Label, Span

logger = get_logger(__name__)

Style = Callable[[str], str]


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderOptions:
    context_lines: int = 0
    tab_width: int = 4
    color: bool = False
    show_summary: bool = False

    def __post_init__(self) -> None:
        if self.context_lines < 0:
            raise ValueError(f"context_lines must be >= 0, got {self.context_lines}")
        if self.tab_width < 1:
            raise ValueError(f"tab_width must be >= 1, got {self.tab_width}")


def _plain(text: str) -> str:
    return text


# Own instance: whether to color is the caller's decision, not a TTY probe.
_chalk = ChalkFactory(ColorMode.Basic16)

_SEVERITY_STYLES: dict[Severity, Style] = {
    Severity.NOTE: _chalk.green.bold,
    Severity.WARNING: _chalk.yellow.bold,
    Severity.ERROR: _chalk.red.bold,
    Severity.BUG: _chalk.red_bright.bold,
}

_NOUNS: dict[Severity, tuple[str, str]] = {
    Severity.BUG: ("internal error", "internal errors"),
    Severity.ERROR: ("error", "errors"),
    Severity.WARNING: ("warning", "warnings"),
    Severity.NOTE: ("note", "notes"),
}


def _sort_key(d: Diagnostic, index: int) -> tuple[int, int, int, int]:
    # Unspanned diagnostics go last; submission index breaks ties.
    span = d.primary_span
    if isinstance(span, Span):
        return (0, span.file, span.start.offset, index)
    return (1, 0, 0, index)


def _group_by_file(d: Diagnostic) -> list[tuple[FileId, list[Label]]]:
    groups: dict[FileId, list[Label]] = {}
    primary = d.primary_label
    if primary is not None:
        groups[primary.span.file] = []
    for lb in d.labels:
        groups.setdefault(lb.span.file, []).append(lb)
    return list(groups.items())


@dataclass(frozen=True, slots=True)
class _Block:
    header: str
    file: FileId
    labels: list[Label]
    anchor: Label


class Renderer:
    """Turns collected diagnostics into text blocks with source snippets.

    Output is deterministic for a given snapshot and options. A span that does
    not fit the SourceMap aborts the whole call with MalformedDiagnostic.
    """

    def __init__(self, source_map: SourceMap, options: RenderOptions | None = None) -> None:
        self.source_map = source_map
        self.options = options or RenderOptions()

    def render(self, collector: Collector) -> list[str]:
        diagnostics = collector.all()
        order = sorted(range(len(diagnostics)), key=lambda i: _sort_key(diagnostics[i], i))
        blocks: list[str] = []
        for i in order:
            try:
                blocks.append(self.render_diagnostic(diagnostics[i]))
            except OutOfRange as exc:
                raise MalformedDiagnostic(str(exc), index=i) from exc
        logger.debug("rendered %d diagnostics", len(blocks))
        return blocks

    def render_diagnostic(self, d: Diagnostic) -> str:
        self._check(d)
        blocks: list[_Block] = []
        for n, (file, labels) in enumerate(_group_by_file(d)):
            primary = d.primary_label if n == 0 else None
            if primary is not None:
                blocks.append(_Block("-->", file, labels, primary))
            else:
                blocks.append(_Block("::: also see", file, labels, labels[0]))

        width = max((self._gutter_width(b) for b in blocks), default=1)
        out = [self._headline(d)]
        for b in blocks:
            out.extend(self._file_block(b, d.severity))
        if d.notes:
            blank = " " * width
            if blocks:
                out.append(self._gutter(f"{blank} |"))
            for text in d.notes:
                for line in text.splitlines() or [""]:
                    gutter = self._gutter(f"{blank} =")
                    out.append(f"{gutter} {line}" if line else gutter)
        return "\n".join(out)

    def _check(self, d: Diagnostic) -> None:
        for lb in d.labels:
            self.source_map.resolve(lb.span.start)
            self.source_map.resolve(lb.span.end)

    def _style(self, style: Style) -> Style:
        return style if self.options.color else _plain

    def _gutter(self, text: str) -> str:
        return self._style(_chalk.blue.bold)(text)

    def _headline(self, d: Diagnostic) -> str:
        tag = d.severity.tag
        if d.code is not None:
            tag = f"{tag}[{code_token(d.code)}]"
        return f"{self._style(_SEVERITY_STYLES[d.severity])(tag)}: {self._style(_chalk.bold)(d.message)}"

    def _line_span(self, sf: SourceFile, span: Span) -> tuple[int, int]:
        first = sf.line_index(span.start.offset) + 1
        last_offset = span.end.offset - 1 if span.end.offset > span.start.offset else span.start.offset
        last = sf.line_index(last_offset) + 1
        return first, max(first, last)

    def _line_window(self, b: _Block) -> tuple[int, int]:
        sf = self.source_map.source(b.file)
        ranges = [self._line_span(sf, lb.span) for lb in b.labels]
        ctx = self.options.context_lines
        lo = max(1, min(r[0] for r in ranges) - ctx)
        hi = min(sf.line_count, max(r[1] for r in ranges) + ctx)
        return lo, hi

    def _gutter_width(self, b: _Block) -> int:
        return len(str(self._line_window(b)[1]))

    def _display(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace").replace("\t", " " * self.options.tab_width)

    def _file_block(self, b: _Block, severity: Severity) -> list[str]:
        sf = self.source_map.source(b.file)
        lo, hi = self._line_window(b)
        width = len(str(hi))
        blank = " " * width
        line, col = self.source_map.resolve(b.anchor.span.start)

        out = [f"{blank}{self._gutter(b.header)} {sf.name}:{line}:{col}", self._gutter(f"{blank} |")]
        spans = [(lb, self._line_span(sf, lb.span)) for lb in b.labels]
        for n in range(lo, hi + 1):
            start, end = sf.line_bounds(n)
            text = self._display(sf.data[start:end])
            num = self._gutter(f"{n:>{width}} |")
            out.append(f"{num} {text}" if text else num)
            for lb, (first, last) in spans:
                if first <= n <= last:
                    out.append(self._underline(sf, lb, n, last, blank, severity))
        return out

    def _underline(self, sf: SourceFile, lb: Label, line: int, last: int, blank: str, severity: Severity) -> str:
        start, end = sf.line_bounds(line)
        s = max(lb.span.start.offset, start)
        e = max(s, min(lb.span.end.offset, end))
        pad = len(self._display(sf.data[start:s]))
        marks = max(1, len(self._display(sf.data[s:e])))
        if lb.is_primary:
            style = self._style(_SEVERITY_STYLES[severity])
            row = "^" * marks
        else:
            style = self._style(_chalk.blue.bold)
            row = "-" * marks
        if lb.message and line == last:
            row = f"{row} {lb.message}"
        return f"{self._gutter(f'{blank} |')} {' ' * pad}{style(row)}"


def render(collector: Collector, source_map: SourceMap, options: RenderOptions | None = None) -> list[str]:
    return Renderer(source_map, options).render(collector)


def summarize(collector: Collector) -> str:
    """One-line tally, worst severity first: "2 errors, 1 warning emitted"."""
    parts = []
    for severity in sorted(Severity, reverse=True):
        n = collector.count(severity)
        if n:
            singular, plural = _NOUNS[severity]
            parts.append(f"{n} {singular if n == 1 else plural}")
    if not parts:
        return "no diagnostics emitted"
    return ", ".join(parts) + " emitted"


def render_to_string(collector: Collector, source_map: SourceMap, options: RenderOptions | None = None) -> str:
    options = options or RenderOptions()
    parts = render(collector, source_map, options)
    if options.show_summary:
        parts.append(summarize(collector))
    if not parts:
        return ""
    return "\n\n".join(parts) + "\n"


def write_report(
    stream: TextIO,
    collector: Collector,
    source_map: SourceMap,
    options: RenderOptions | None = None,
) -> None:
    # Render fully before writing so a malformed diagnostic leaves the stream untouched.
    text = render_to_string(collector, source_map, options)
    stream.write(text)
    stream.flush()

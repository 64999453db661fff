from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .diagnostic import Severity
from .render import RenderOptions, render, render_to_string, summarize, write_report
from .reporter import Collector
from .source_map import SourceMap
from .spans import FileId


@dataclass(slots=True)
class Session:
    """One compilation session: the files it reads and the problems it finds.

    A session is passed by reference to whatever needs to report; nothing in
    this package keeps a global one.
    """

    sources: SourceMap = field(default_factory=SourceMap)
    diagnostics: Collector = field(default_factory=Collector)
    options: RenderOptions = field(default_factory=RenderOptions)

    def add_source(self, name: str, text: str | bytes) -> FileId:
        return self.sources.register(name, text)

    def should_stop(self, severity: Severity = Severity.ERROR) -> bool:
        return self.diagnostics.has_severity_at_least(severity)

    def render(self) -> list[str]:
        return render(self.diagnostics, self.sources, self.options)

    def report(self) -> str:
        return render_to_string(self.diagnostics, self.sources, self.options)

    def write_report(self, stream: TextIO) -> None:
        write_report(stream, self.diagnostics, self.sources, self.options)

    def summary(self) -> str:
        return summarize(self.diagnostics)

from __future__ import annotations

from .api import Session
from .codes import Code, ErrorCode
from .diagnostic import Diagnostic, DiagnosticBuilder, Severity, bug, error, note, warning
from .errors import DiagnosticsError, InvalidDiagnostic, MalformedDiagnostic, OutOfRange
from .render import RenderOptions, Renderer, render, render_to_string, summarize, write_report
from .reporter import Collector
from .source_map import SourceFile, SourceMap
from .spans import UNSPANNED, FileId, Label, LabelRole, Position, Span, Unspanned, join_spans

__all__ = [
    "Code",
    "Collector",
    "Diagnostic",
    "DiagnosticBuilder",
    "DiagnosticsError",
    "ErrorCode",
    "FileId",
    "InvalidDiagnostic",
    "Label",
    "LabelRole",
    "MalformedDiagnostic",
    "OutOfRange",
    "Position",
    "RenderOptions",
    "Renderer",
    "Session",
    "Severity",
    "SourceFile",
    "SourceMap",
    "Span",
    "UNSPANNED",
    "Unspanned",
    "bug",
    "error",
    "join_spans",
    "note",
    "render",
    "render_to_string",
    "summarize",
    "warning",
    "write_report",
]

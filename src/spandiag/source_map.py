from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator

from .errors import OutOfRange
from .spans import FileId, Position, Span


def _is_continuation(b: int) -> bool:
    return b & 0xC0 == 0x80


def _count_chars(data: bytes) -> int:
    # Counted on the decoded text so columns match what the renderer displays:
    # each invalid or truncated sequence is one U+FFFD.
    return len(data.decode("utf-8", errors="replace"))


def _line_starts(data: bytes) -> tuple[int, ...]:
    starts = [0]
    i = data.find(b"\n")
    while i != -1:
        starts.append(i + 1)
        i = data.find(b"\n", i + 1)
    return tuple(starts)


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A registered source text.

    All offsets are byte offsets into the UTF-8 encoding of ``text``.
    """

    id: FileId
    name: str
    text: str
    data: bytes = field(repr=False)
    line_starts: tuple[int, ...] = field(repr=False)

    @classmethod
    def create(cls, id: FileId, name: str, text: str | bytes) -> "SourceFile":
        if isinstance(text, bytes):
            data = text
            text = data.decode("utf-8", errors="replace")
        else:
            data = text.encode("utf-8", errors="surrogateescape")
        return cls(id=id, name=name, text=text, data=data, line_starts=_line_starts(data))

    def __len__(self) -> int:
        return len(self.data)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_index(self, offset: int) -> int:
        """0-based index of the line containing ``offset``."""
        return bisect_right(self.line_starts, offset) - 1

    def line_bounds(self, line: int) -> tuple[int, int]:
        """Byte range of 1-based ``line``, without its terminator."""
        start = self.line_starts[line - 1]
        if line < len(self.line_starts):
            end = self.line_starts[line] - 1
            if end > start and self.data[end - 1] == 0x0D:
                end -= 1
        else:
            end = len(self.data)
        return start, end


class SourceMap:
    """Registry of source files addressed by dense FileIds.

    Files are registered once and never change afterwards, so spans created at
    any point stay valid for the lifetime of the map. Registration is meant to
    happen before concurrent readers start; lookups never mutate.
    """

    def __init__(self) -> None:
        self._files: list[SourceFile] = []

    def register(self, name: str, text: str | bytes) -> FileId:
        file_id = len(self._files)
        self._files.append(SourceFile.create(file_id, name, text))
        return file_id

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, file: object) -> bool:
        return isinstance(file, int) and 0 <= file < len(self._files)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._files)

    def source(self, file: FileId) -> SourceFile:
        if file not in self:
            raise OutOfRange("unknown file id", file=file, value=file)
        return self._files[file]

    def file_name(self, file: FileId) -> str:
        return self.source(file).name

    def line_count(self, file: FileId) -> int:
        return self.source(file).line_count

    def resolve(self, pos: Position) -> tuple[int, int]:
        """Map a byte position to a 1-based (line, column) pair.

        Columns count code points, not bytes.
        """
        sf = self.source(pos.file)
        if pos.offset > len(sf):
            raise OutOfRange(f"offset past end of {sf.name!r} ({len(sf)} bytes)", file=pos.file, value=pos.offset)
        idx = sf.line_index(pos.offset)
        start = sf.line_starts[idx]
        return idx + 1, _count_chars(sf.data[start : pos.offset]) + 1

    def resolve_span(self, span: Span) -> tuple[tuple[int, int], tuple[int, int]]:
        return self.resolve(span.start), self.resolve(span.end)

    def offset_of(self, file: FileId, line: int, column: int) -> int:
        """Inverse of ``resolve``: byte offset of a 1-based (line, column)."""
        sf = self.source(file)
        if not 1 <= line <= sf.line_count:
            raise OutOfRange(f"line out of range for {sf.name!r}", file=file, value=line)
        start, end = sf.line_bounds(line)
        if line < sf.line_count:
            # The terminator itself is addressable.
            end = sf.line_starts[line] - 1
        if column < 1:
            raise OutOfRange(f"column out of range for {sf.name!r}", file=file, value=column)
        offset = start
        for _ in range(column - 1):
            if offset >= end:
                raise OutOfRange(f"column past end of line {line} in {sf.name!r}", file=file, value=column)
            offset += 1
            while offset < end and _is_continuation(sf.data[offset]):
                offset += 1
        return offset

    def line_range(self, file: FileId, line: int) -> tuple[int, int]:
        sf = self.source(file)
        if not 1 <= line <= sf.line_count:
            raise OutOfRange(f"line out of range for {sf.name!r}", file=file, value=line)
        return sf.line_bounds(line)

    def line_text(self, file: FileId, line: int) -> str:
        """Text of a 1-based line, without its line terminator."""
        start, end = self.line_range(file, line)
        return self.source(file).data[start:end].decode("utf-8", errors="replace")

    def slice(self, span: Span) -> str:
        sf = self.source(span.file)
        if span.end.offset > len(sf):
            raise OutOfRange(f"span past end of {sf.name!r}", file=span.file, value=span.end.offset)
        return sf.data[span.start.offset : span.end.offset].decode("utf-8", errors="replace")

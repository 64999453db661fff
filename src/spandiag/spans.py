from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, TypeAlias


FileId: TypeAlias = int


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A byte offset inside a registered file.

    Offsets are 0-based and may equal the file length (end of file). They are
    only checked against the file when resolved through a SourceMap.
    """

    file: FileId
    offset: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"negative offset: {self.offset}")


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open byte range [start, end) in a single file."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.start.file != self.end.file:
            raise ValueError(f"span crosses files: {self.start.file} != {self.end.file}")
        if self.start.offset > self.end.offset:
            raise ValueError(f"span start {self.start.offset} is after end {self.end.offset}")

    @classmethod
    def of(cls, file: FileId, start: int, end: int) -> "Span":
        return cls(Position(file, start), Position(file, end))

    @property
    def file(self) -> FileId:
        return self.start.file

    @property
    def length(self) -> int:
        return self.end.offset - self.start.offset

    def is_empty(self) -> bool:
        return self.start.offset == self.end.offset


@dataclass(frozen=True, slots=True)
class Unspanned:
    """Marker for diagnostics that have no place in any source file."""

    def __repr__(self) -> str:
        return "UNSPANNED"


UNSPANNED: Final = Unspanned()

AnySpan: TypeAlias = Span | Unspanned


def join_spans(first: Span, *rest: Span) -> Span:
    """Smallest span covering all given spans (they must share a file)."""
    start = first.start
    end = first.end
    for sp in rest:
        if sp.file != first.file:
            raise ValueError(f"cannot join spans from files {first.file} and {sp.file}")
        start = min(start, sp.start)
        end = max(end, sp.end)
    return Span(start, end)


class LabelRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class Label:
    span: Span
    role: LabelRole
    message: str | None = None

    @property
    def is_primary(self) -> bool:
        return self.role is LabelRole.PRIMARY

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from spandiag import Position, SourceMap


_texts = st.text(
    alphabet=st.sampled_from(list("ab \t\n\r") + ["é", "λ", "中", "😀"]),
    max_size=80,
)


def _char_offsets(text: str) -> list[int]:
    offsets = [0]
    for ch in text:
        offsets.append(offsets[-1] + len(ch.encode("utf-8")))
    return offsets


@given(_texts)
@settings(max_examples=300)
def test_resolve_and_offset_of_are_inverses(text: str) -> None:
    sm = SourceMap()
    f = sm.register("fuzz.txt", text)
    for offset in _char_offsets(text):
        line, column = sm.resolve(Position(f, offset))
        assert sm.offset_of(f, line, column) == offset


@given(_texts)
def test_every_line_is_readable(text: str) -> None:
    sm = SourceMap()
    f = sm.register("fuzz.txt", text)
    assert sm.line_count(f) == text.count("\n") + 1
    for n in range(1, sm.line_count(f) + 1):
        line = sm.line_text(f, n)
        assert "\n" not in line

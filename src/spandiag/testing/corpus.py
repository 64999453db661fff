from __future__ import annotations

import random
import string

from ..api import Session
from ..diagnostic import Diagnostic, Severity
from ..spans import UNSPANNED, Span


_WORDS = ["let", "fn", "return", "if", "else", "while", "struct", "const", "var", "pub"]
_WIDE = ["é", "ß", "λ", "中", "文", "\t"]


def _ident(r: random.Random) -> str:
    head = r.choice(string.ascii_letters + "_")
    tail = "".join(r.choice(string.ascii_letters + string.digits + "_") for _ in range(r.randint(0, 8)))
    return head + tail


def _gen_line(r: random.Random) -> str:
    words = []
    for _ in range(r.randint(0, 6)):
        k = r.random()
        if k < 0.4:
            words.append(r.choice(_WORDS))
        elif k < 0.9:
            words.append(_ident(r))
        else:
            words.append(r.choice(_WIDE))
    return " ".join(words)


def generate_source(r: random.Random) -> str:
    lines = [_gen_line(r) for _ in range(r.randint(1, 30))]
    eol = "\r\n" if r.random() < 0.1 else "\n"
    text = eol.join(lines)
    if r.random() < 0.7:
        text += eol
    return text


def _char_boundary(data: bytes, offset: int) -> int:
    while 0 < offset < len(data) and data[offset] & 0xC0 == 0x80:
        offset -= 1
    return offset


def _random_span(r: random.Random, file: int, data: bytes) -> Span:
    a = _char_boundary(data, r.randint(0, len(data)))
    b = _char_boundary(data, r.randint(a, min(len(data), a + 24)))
    return Span.of(file, a, b)


def _gen_diagnostic(r: random.Random, sources: list[bytes]) -> Diagnostic:
    severity = r.choice(list(Severity))
    code = f"E{r.randint(0, 999):04d}" if r.random() < 0.5 else None
    draft = Diagnostic.build(severity, " ".join(_ident(r) for _ in range(r.randint(1, 5))), code)
    if r.random() < 0.15:
        draft = draft.unspanned()
        for _ in range(r.randint(0, 1)):
            file = r.randrange(len(sources))
            draft = draft.with_secondary_label(_random_span(r, file, sources[file]), _ident(r))
    else:
        file = r.randrange(len(sources))
        draft = draft.with_primary_label(_random_span(r, file, sources[file]), r.choice([None, _ident(r)]))
        for _ in range(r.randint(0, 3)):
            other = file if r.random() < 0.7 else r.randrange(len(sources))
            draft = draft.with_secondary_label(_random_span(r, other, sources[other]), r.choice([None, _ident(r)]))
    for _ in range(r.randint(0, 2)):
        draft = draft.with_note(f"{_ident(r)}: {_gen_line(r)}")
    return draft.finish()


def generate_session(*, seed: int, files: int = 3, count: int = 50) -> Session:
    """Deterministic session with random sources and valid diagnostics."""
    r = random.Random(seed)
    session = Session()
    data: list[bytes] = []
    for i in range(files):
        text = generate_source(r)
        session.add_source(f"src/file_{i:03d}.txt", text)
        data.append(text.encode("utf-8"))
    for _ in range(count):
        session.diagnostics.submit(_gen_diagnostic(r, data))
    return session


def sample_session() -> Session:
    """Small hand-written session exercising every block layout.

    Its rendering is pinned in tests/fixtures/sample_report.txt.
    """
    session = Session()
    main = session.add_source("main.src", "let x = 1;\nlet y = x +;\n\tcall(y)\n")
    lib = session.add_source("lib.src", "fn call(v) {\n  v\n}\n")
    submit = session.diagnostics.submit
    submit(
        Diagnostic.build(Severity.WARNING, "unused variable", "W010")
        .with_primary_label(Span.of(main, 4, 5), "never read")
        .with_note("prefix it with an underscore")
        .finish()
    )
    submit(
        Diagnostic.build(Severity.ERROR, "mismatched argument count", "E002")
        .with_primary_label(Span.of(main, 25, 29), "called with 1 argument")
        .with_secondary_label(Span.of(lib, 3, 7), "defined here")
        .finish()
    )
    submit(
        Diagnostic.build(Severity.ERROR, "expected expression", "E001")
        .with_primary_label(Span.of(main, 22, 22), "expected an expression here")
        .with_secondary_label(Span.of(main, 21, 22), "operator")
        .finish()
    )
    session.diagnostics.bug(UNSPANNED, "type table out of sync")
    session.diagnostics.info("compiling main.src")
    return session

from __future__ import annotations

import io

from spandiag import UNSPANNED, Session, Severity, Span


def _parse_digits(session: Session, file: int) -> list[int] | None:
    # A toy pass: reports every non-digit and keeps going.
    text = session.sources.source(file).text
    out: list[int] = []
    for i, ch in enumerate(text):
        if ch.isdigit():
            out.append(int(ch))
        elif not ch.isspace():
            session.diagnostics.error(Span.of(file, i, i + 1), f"not a digit: {ch!r}", code="D001")
    return None if session.should_stop() else out


def test_session_accumulates_and_reports() -> None:
    session = Session()
    good = session.add_source("good.txt", "1 2 3\n")
    bad = session.add_source("bad.txt", "1 x 3 y\n")
    assert _parse_digits(session, good) == [1, 2, 3]
    assert _parse_digits(session, bad) is None
    assert session.diagnostics.count(Severity.ERROR) == 2
    assert session.summary() == "2 errors emitted"

    text = session.report()
    assert text.count("error[D001]") == 2
    assert text.index("'x'") < text.index("'y'")

    buf = io.StringIO()
    session.write_report(buf)
    assert buf.getvalue() == text


def test_session_without_errors_continues() -> None:
    session = Session()
    session.diagnostics.warning(UNSPANNED, "no input files given")
    assert not session.should_stop()
    assert session.should_stop(Severity.WARNING)
    assert session.render() == ["warning: no input files given"]

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from spandiag import RenderOptions
from spandiag.testing import generate_session, sample_session


# Update this by running: `python scripts/compute_snapshot_hash.py`
SAMPLE_REPORT = Path(__file__).parent / "fixtures" / "sample_report.txt"


def _digest(seed: int, count: int, options: RenderOptions) -> str:
    session = generate_session(seed=seed, count=count)
    session.options = options
    h = hashlib.sha256()
    for block in session.render():
        h.update(block.encode("utf-8"))
        h.update(b"\n---\n")
    return h.hexdigest()


def test_sample_report_matches_snapshot() -> None:
    session = sample_session()
    session.options = RenderOptions(show_summary=True)
    expected = SAMPLE_REPORT.read_text(encoding="utf-8")
    actual = session.report()
    assert actual == expected, f"sample report changed\n--- expected\n{expected}--- actual\n{actual}"


def test_corpus_renders_identically_across_sessions() -> None:
    seed = int(os.environ.get("SPANDIAG_SNAPSHOT_SEED", "1"))
    count = int(os.environ.get("SPANDIAG_SNAPSHOT_CASES", "300"))
    for options in (RenderOptions(), RenderOptions(context_lines=2, show_summary=True)):
        assert _digest(seed, count, options) == _digest(seed, count, options)


def test_corpus_blocks_follow_display_order() -> None:
    session = generate_session(seed=7, count=200)
    blocks = session.render()
    assert len(blocks) == 200
    # Every spanned block comes before every unspanned one.
    arrows = ["--> src/" in b for b in blocks]
    assert arrows == sorted(arrows, reverse=True)


def test_corpus_sessions_differ_by_seed() -> None:
    assert _digest(1, 50, RenderOptions()) != _digest(2, 50, RenderOptions())

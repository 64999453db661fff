from __future__ import annotations

import argparse
import hashlib
from pathlib import Path

from spandiag import RenderOptions
from spandiag.testing import sample_session


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="compute_snapshot_hash")
    ap.add_argument("--out", default="tests/fixtures/sample_report.txt")
    ap.add_argument("--check", action="store_true", help="Only compare, do not rewrite")
    args = ap.parse_args(argv)

    session = sample_session()
    session.options = RenderOptions(show_summary=True)
    report = session.report()
    out = Path(args.out)

    if args.check:
        current = out.read_text(encoding="utf-8") if out.exists() else ""
        if current != report:
            print(f"{out} is stale")
            return 1
    else:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(report, encoding="utf-8")

    print(hashlib.sha256(report.encode("utf-8")).hexdigest())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import json
from pathlib import Path

from spandiag.serialize import diagnostic_to_dict
from spandiag.testing import generate_session


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="generate_corpus")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=200)
    ap.add_argument("--files", type=int, default=3)
    ap.add_argument("--out", default="tests/fixtures/generated_corpus")
    args = ap.parse_args(argv)

    session = generate_session(seed=args.seed, files=args.files, count=args.count)
    payload = {
        "files": [{"name": sf.name, "text": sf.text} for sf in session.sources],
        "diagnostics": [diagnostic_to_dict(d) for d in session.diagnostics.all()],
    }

    out_dir = Path(args.out).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    p = out_dir / f"seed_{args.seed}_count_{args.count}.json"
    p.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    # Feed it back with: spandiag <path>
    print(str(p))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

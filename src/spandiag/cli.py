from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import Session
from .diagnostic import Severity
from .errors import DiagnosticsError, MalformedDiagnostic
from .log import get_logger, parse_log_level, setup_logging
from .render import RenderOptions
from .serialize import diagnostic_from_dict

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_BUG = 2
EXIT_BAD_REPORT = 3


def load_session(path: str | Path, options: RenderOptions) -> Session:
    """Build a session from a JSON report (see ``diagnostic_to_dict``)."""
    p = Path(path).expanduser().resolve()
    payload = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"report must be a JSON object, got {type(payload).__name__}")
    session = Session(options=options)
    for entry in payload.get("files", ()):
        if not isinstance(entry, dict):
            raise ValueError(f"file entry must be an object, got {type(entry).__name__}")
        name = entry.get("name") or entry.get("path")
        if name is None:
            raise ValueError("file entry needs a 'name' or 'path'")
        if "text" in entry:
            text: str | bytes = entry["text"]
        else:
            text = (p.parent / entry["path"]).read_bytes()
        file_id = session.add_source(name, text)
        logger.debug("registered %s as file %d", name, file_id)
    for raw in payload.get("diagnostics", ()):
        session.diagnostics.submit(diagnostic_from_dict(raw))
    return session


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="spandiag", description="Render a JSON diagnostics report")
    ap.add_argument("report", help="JSON file with 'files' and 'diagnostics'")
    ap.add_argument("-C", "--context", type=int, default=0, help="Extra source lines around labels")
    ap.add_argument("--tab-width", type=int, default=4)
    ap.add_argument("--color", action=argparse.BooleanOptionalAction, default=False, help="Colorize output")
    ap.add_argument("--summary", action="store_true", help="Append an 'N errors emitted' line")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ... (default: $SPANDIAG_LOG_LEVEL)")
    args = ap.parse_args(argv)

    setup_logging(parse_log_level(args.log_level))
    options = RenderOptions(
        context_lines=args.context,
        tab_width=args.tab_width,
        color=args.color,
        show_summary=args.summary,
    )

    try:
        session = load_session(args.report, options)
    except (OSError, KeyError, ValueError, DiagnosticsError) as exc:
        print(f"spandiag: cannot load {args.report}: {exc}", file=sys.stderr)
        return EXIT_BAD_REPORT

    try:
        session.write_report(sys.stdout)
    except MalformedDiagnostic as exc:
        print(f"spandiag: {session.summary()} (could not render: {exc})", file=sys.stderr)
        return EXIT_BAD_REPORT

    if session.should_stop(Severity.BUG):
        return EXIT_BUG
    if session.should_stop(Severity.ERROR):
        return EXIT_ERRORS
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())

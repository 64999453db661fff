from __future__ import annotations

from typing import Any

from .codes import Code, ErrorCode
from .diagnostic import Diagnostic, Severity
from .spans import LabelRole, Span


def diagnostic_to_dict(d: Diagnostic) -> dict[str, Any]:
    code: Any = d.code
    if isinstance(code, ErrorCode):
        code = code.short
    return {
        "severity": d.severity.tag,
        "code": code,
        "message": d.message,
        "labels": [
            {
                "file": lb.span.file,
                "start": lb.span.start.offset,
                "end": lb.span.end.offset,
                "role": lb.role.value,
                "message": lb.message,
            }
            for lb in d.labels
        ],
        "notes": list(d.notes),
        "unspanned": d.unspanned,
    }


def diagnostic_from_dict(obj: dict[str, Any]) -> Diagnostic:
    """Rebuild a diagnostic through the builder, so invariants are re-checked."""
    if not isinstance(obj, dict):
        raise ValueError(f"diagnostic must be an object, got {type(obj).__name__}")
    try:
        severity = Severity.parse(str(obj["severity"]))
        message = obj["message"]
    except KeyError as exc:
        raise ValueError(f"diagnostic is missing {exc.args[0]!r}") from None
    code: Code | None = obj.get("code")
    draft = Diagnostic.build(severity, str(message), code)
    for raw in obj.get("labels", ()):
        try:
            span = Span.of(int(raw["file"]), int(raw["start"]), int(raw["end"]))
            role = LabelRole(raw.get("role", LabelRole.PRIMARY.value))
        except KeyError as exc:
            raise ValueError(f"label is missing {exc.args[0]!r}") from None
        except TypeError as exc:
            raise ValueError(f"bad label {raw!r}: {exc}") from None
        if role is LabelRole.PRIMARY:
            draft = draft.with_primary_label(span, raw.get("message"))
        else:
            draft = draft.with_secondary_label(span, raw.get("message"))
    for text in obj.get("notes", ()):
        draft = draft.with_note(str(text))
    if obj.get("unspanned", False):
        draft = draft.unspanned()
    return draft.finish()

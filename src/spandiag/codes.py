from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class ErrorCode:
    """A stable error identifier plus its long-form explanation.

    Only ``short`` ever reaches rendered output. ``long`` is for whatever
    explain/lookup facility the host program provides.
    """

    short: str
    long: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.short


Code: TypeAlias = str | int | ErrorCode


def code_token(code: Code) -> str:
    if isinstance(code, ErrorCode):
        return code.short
    return str(code)

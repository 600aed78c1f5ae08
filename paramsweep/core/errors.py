from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SweepError(Exception):
    """Error envelope shared by the loader, the expander and the CLI.

    `path` names the offending parameter (or CLI option), `file` the
    parameter file it came from, when known.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def location(self) -> str:
        return self.file or "<params>"

    def __str__(self) -> str:
        loc = self.location()
        if self.path:
            return f"{loc}: {self.code}: {self.path}: {self.message}"
        return f"{loc}: {self.code}: {self.message}"


@dataclass(frozen=True)
class ParamLoadError(SweepError):
    """A parameter file could not be read. `line` is 1-based when known."""

    line: Optional[int] = None

    def location(self) -> str:
        loc = self.file or "<params>"
        return f"{loc}:{self.line}" if self.line is not None else loc


class ParamExpansionError(SweepError):
    """A parameter mapping cannot be expanded."""

    def __str__(self) -> str:
        if self.path:
            return f"{self.location()}: {self.code}: parameter {self.path!r} {self.message}"
        return super().__str__()

from __future__ import annotations

import inspect
from pathlib import Path
from typing import Any, Optional

from paramsweep.core.model import SourceLocation
from paramsweep.core.provenance.repo import RepositoryQuery
from paramsweep.core.provenance.tag import tag


def caller_location(depth: int = 1) -> SourceLocation:
    """Location of the frame `depth` levels above the caller of this function."""
    frame = inspect.currentframe()
    try:
        target = frame.f_back if frame is not None else None
        for _ in range(depth):
            if target is None:
                break
            target = target.f_back
        if target is None:
            raise RuntimeError("call stack is not deep enough to capture a source location")
        return SourceLocation(file=str(Path(target.f_code.co_filename).resolve()), line=target.f_lineno)
    finally:
        del frame


def tag_here(
    params: Any,
    path: str | Path | None = None,
    *,
    repo: Optional[RepositoryQuery] = None,
) -> Any:
    """Like `tag`, with `script` set to the file and line that called `tag_here`."""
    return tag(params, path, caller_location(), repo=repo)

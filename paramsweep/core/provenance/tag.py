from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, MutableMapping, Optional

from paramsweep.core.provenance.repo import GitRepository, RepositoryQuery, project_dir

logger = logging.getLogger(__name__)

COMMIT_KEY = "commit"
SCRIPT_KEY = "script"


def current_commit(
    path: str | Path | None = None, *, repo: Optional[RepositoryQuery] = None
) -> Optional[str]:
    """Return the revision id of the repository at `path` (default: project dir).

    A dirty working tree yields `"<id>_dirty"`. Returns None, with a warning,
    when `path` is not a git repository.
    """

    gitpath = Path(path) if path is not None else project_dir()
    info = (repo or GitRepository()).query(gitpath)
    if info is None:
        logger.warning("%s is not a git repository; no commit id available", gitpath)
        return None
    if info.dirty:
        logger.warning("git repository at %s is dirty; marking commit id as _dirty", gitpath)
    return info.label


def tag(
    params: Any,
    path: str | Path | None = None,
    source: Any = None,
    *,
    repo: Optional[RepositoryQuery] = None,
) -> Any:
    """Add a `commit` entry (and optionally `script`) to `params`.

    Nothing happens when `path` is not a repository or when `params` already
    holds a `commit` key. `script` is the `source` location relative to `path`
    and is never overwritten.

    Mutable mappings are updated in place and returned. Read-only mappings are
    copied into a new dict first.
    """

    gitpath = Path(path) if path is not None else project_dir()
    commit = current_commit(gitpath, repo=repo)
    if commit is None:
        return params

    if COMMIT_KEY in params:
        logger.warning("parameters already have a %r key; not adding git information", COMMIT_KEY)
        return params

    if not isinstance(params, MutableMapping):
        params = dict(params)
    params[COMMIT_KEY] = commit

    if source is not None:
        if SCRIPT_KEY in params:
            logger.warning(
                "parameters already have a %r key; not overwriting it with the script name",
                SCRIPT_KEY,
            )
        else:
            params[SCRIPT_KEY] = relative_path(source, gitpath)
    return params


def relative_path(location: Any, base: str | Path) -> str:
    """Render `location` relative to `base`; `SourceLocation` keeps its `#line`.

    A location with no relative form (another drive on Windows) is kept as given.
    """
    try:
        return os.path.relpath(str(location), str(base))
    except ValueError:
        return str(location)

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from paramsweep.core.model import RevisionInfo

logger = logging.getLogger(__name__)

PROJECT_DIR_ENV = "PARAMSWEEP_PROJECT_DIR"


class RepositoryQuery(Protocol):
    def query(self, path: str | Path) -> Optional[RevisionInfo]: ...


def find_repo_root(start: str | None = None) -> Path:
    p = Path(start or os.getcwd()).resolve()
    for parent in [p] + list(p.parents):
        if (parent / ".git").exists():
            return parent
    return p


def project_dir(start: str | None = None) -> Path:
    """Default repository path for tagging.

    Resolution order:
      1) PARAMSWEEP_PROJECT_DIR
      2) nearest parent of `start` (or the cwd) holding a .git entry
      3) `start` (or the cwd) itself
    """

    override = (os.getenv(PROJECT_DIR_ENV, "") or "").strip()
    if override:
        return Path(override).resolve()
    return find_repo_root(start)


@dataclass(frozen=True)
class GitRepository:
    """Read-only revision queries through the `git` executable.

    `path` must be the top level of a working tree; subdirectories and paths
    outside a repository report no revision. Untracked files do not count as
    dirty.
    """

    executable: str = "git"
    timeout_s: float = 30.0

    def query(self, path: str | Path) -> Optional[RevisionInfo]:
        root = Path(path).resolve()

        toplevel = self._run(root, "rev-parse", "--show-toplevel")
        if not toplevel or Path(toplevel).resolve() != root:
            return None

        head = self._run(root, "rev-parse", "HEAD")
        if not head:
            return None

        status = self._run(root, "status", "--porcelain", "--untracked-files=no")
        if status is None:
            return None

        return RevisionInfo(commit=head, dirty=bool(status))

    def _run(self, cwd: Path, *args: str) -> Optional[str]:
        try:
            proc = subprocess.run(
                [self.executable, *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("git %s failed in %s: %s", " ".join(args), cwd, e)
            return None
        if proc.returncode != 0:
            logger.debug(
                "git %s exited %d in %s: %s",
                " ".join(args),
                proc.returncode,
                cwd,
                (proc.stderr or "").strip(),
            )
            return None
        return (proc.stdout or "").strip()

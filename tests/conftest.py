import logging
import shutil
import subprocess
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_paramsweep_logger():
    yield
    logger = logging.getLogger("paramsweep")
    for h in list(logger.handlers):
        if getattr(h, "_paramsweep", False):
            logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-c",
            "user.name=paramsweep",
            "-c",
            "user.email=paramsweep@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    root = tmp_path / "repo"
    root.mkdir()
    git(root, "init", "-q")
    (root / "params.yaml").write_text("a: [1, 2]\nb: 4\n", encoding="utf-8")
    git(root, "add", "params.yaml")
    git(root, "commit", "-q", "-m", "init")
    return root


@pytest.fixture
def head(git_repo: Path) -> str:
    return git(git_repo, "rev-parse", "HEAD")

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional

from paramsweep.core.model import RevisionInfo, SourceLocation
from paramsweep.core.provenance.tag import current_commit, relative_path, tag


@dataclass
class FakeRepo:
    info: Optional[RevisionInfo]
    calls: list = field(default_factory=list)

    def query(self, path):
        self.calls.append(Path(path))
        return self.info


CLEAN = RevisionInfo(commit="96df587e45b29e7a46348a3d780db1f85f41de04")
DIRTY = RevisionInfo(commit="abc123", dirty=True)


def test_tag_adds_commit_in_place():
    d = {"x": 3, "y": 4}

    got = tag(d, "/work/project", repo=FakeRepo(CLEAN))

    assert got is d
    assert d == {"x": 3, "y": 4, "commit": CLEAN.commit}


def test_tag_dirty_repo_suffixes_commit(caplog):
    caplog.set_level(logging.WARNING, logger="paramsweep")
    d = {"x": 3}

    tag(d, "/work/project", repo=FakeRepo(DIRTY))

    assert d["commit"] == "abc123_dirty"
    assert "dirty" in caplog.text


def test_tag_not_a_repository_is_noop(caplog):
    caplog.set_level(logging.WARNING, logger="paramsweep")
    d = {"x": 3}

    got = tag(d, "/not/a/repo", SourceLocation("/not/a/repo/run.py", 3), repo=FakeRepo(None))

    assert got is d
    assert d == {"x": 3}
    assert "not a git repository" in caplog.text


def test_tag_is_idempotent():
    repo = FakeRepo(CLEAN)
    once = tag({"x": 3}, "/work/project", repo=repo)
    twice = tag(tag({"x": 3}, "/work/project", repo=repo), "/work/project", repo=repo)

    assert once == twice


def test_tag_keeps_existing_commit(caplog):
    caplog.set_level(logging.WARNING, logger="paramsweep")
    d = {"x": 3, "commit": "user-provided"}

    got = tag(d, "/work/project", "/work/project/run.py", repo=FakeRepo(CLEAN))

    assert got == {"x": 3, "commit": "user-provided"}
    assert "already have a 'commit' key" in caplog.text


def test_tag_adds_script_relative_to_repo():
    d = {"x": 3}
    base = os.path.abspath("work")
    loc = SourceLocation(os.path.join(base, "scripts", "run.py"), 10)

    tag(d, base, loc, repo=FakeRepo(CLEAN))

    assert d["commit"] == CLEAN.commit
    assert d["script"] == os.path.join("scripts", "run.py") + "#10"


def test_tag_plain_source_uses_string_form():
    base = os.path.abspath("work")
    d = tag({}, base, Path(base) / "notebook.py", repo=FakeRepo(CLEAN))

    assert d["script"] == "notebook.py"


def test_tag_keeps_existing_script(caplog):
    caplog.set_level(logging.WARNING, logger="paramsweep")
    d = {"script": "mine.py"}

    tag(d, "/work/project", "/work/project/run.py", repo=FakeRepo(CLEAN))

    assert d == {"script": "mine.py", "commit": CLEAN.commit}
    assert "'script'" in caplog.text


def test_tag_read_only_mapping_returns_new_dict():
    frozen = MappingProxyType({"x": 3})

    got = tag(frozen, "/work/project", repo=FakeRepo(CLEAN))

    assert isinstance(got, dict)
    assert got == {"x": 3, "commit": CLEAN.commit}
    assert "commit" not in frozen


def test_tag_defaults_to_project_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("PARAMSWEEP_PROJECT_DIR", str(tmp_path))
    repo = FakeRepo(CLEAN)

    tag({}, repo=repo)

    assert repo.calls == [tmp_path.resolve()]


def test_current_commit_labels():
    assert current_commit("/p", repo=FakeRepo(CLEAN)) == CLEAN.commit
    assert current_commit("/p", repo=FakeRepo(DIRTY)) == "abc123_dirty"
    assert current_commit("/p", repo=FakeRepo(None)) is None


def test_relative_path_keeps_line_marker():
    base = os.path.abspath("proj")
    loc = SourceLocation(os.path.join(base, "a", "b.py"), 7)

    assert relative_path(loc, base) == os.path.join("a", "b.py") + "#7"


def test_relative_path_across_drives_keeps_location(monkeypatch):
    def no_common_root(path, start=None):
        raise ValueError("path is on mount 'D:', start on mount 'C:'")

    monkeypatch.setattr(os.path, "relpath", no_common_root)
    loc = SourceLocation(file=r"D:\runs\sweep.py", line=12)

    assert relative_path(loc, r"C:\work") == r"D:\runs\sweep.py#12"

    d = {"x": 1}
    tag(d, r"C:\work", loc, repo=FakeRepo(CLEAN))
    assert d["script"] == r"D:\runs\sweep.py#12"

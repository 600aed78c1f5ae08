"""Name, expand and tag parameter sets for simulation runs."""
from __future__ import annotations

from paramsweep.core.errors import ParamExpansionError, ParamLoadError, SweepError
from paramsweep.core.expand.expand_params import expand, expanded_count, expansion_keys
from paramsweep.core.model import ExpandGroup, RevisionInfo, Scalar, SourceLocation
from paramsweep.core.naming.savename import (
    access,
    allaccess,
    default_allowed,
    default_prefix,
    savename,
)
from paramsweep.core.provenance.callsite import tag_here
from paramsweep.core.provenance.repo import GitRepository, project_dir
from paramsweep.core.provenance.tag import current_commit, tag

__all__ = [
    "ExpandGroup",
    "GitRepository",
    "ParamExpansionError",
    "ParamLoadError",
    "RevisionInfo",
    "Scalar",
    "SourceLocation",
    "SweepError",
    "access",
    "allaccess",
    "current_commit",
    "default_allowed",
    "default_prefix",
    "expand",
    "expanded_count",
    "expansion_keys",
    "project_dir",
    "savename",
    "tag",
    "tag_here",
]

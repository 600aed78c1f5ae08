from __future__ import annotations

import copy
import math
from itertools import product
from typing import Any, Mapping, Sequence

from paramsweep.core.errors import ParamExpansionError
from paramsweep.core.model import ExpandGroup, Scalar, classify


def expand(params: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Expand `params` into every combination of its expansion fields.

    Expansion fields are `list` values (or explicit `ExpandGroup` values); all
    other values are kept constant across the results. Each result keeps the
    key order of `params`.

    Ordering is column-major: the first expansion field varies fastest.

        >>> expand({"a": [1, 2], "b": 4, "run": ["bi", "tri"]})
        [{'a': 1, 'b': 4, 'run': 'bi'}, {'a': 2, 'b': 4, 'run': 'bi'},
         {'a': 1, 'b': 4, 'run': 'tri'}, {'a': 2, 'b': 4, 'run': 'tri'}]

    Lists, tuples, dicts and sets are copied into each result; other values are
    shared as is. A mapping without expansion fields yields a single copy of
    itself; an empty expansion field yields no mappings at all.
    """

    levels = _expansion_levels(params)
    keys = list(levels)

    # itertools.product varies its last argument fastest, so feed keys reversed.
    reversed_keys = keys[::-1]
    out: list[dict[str, Any]] = []
    for combo in product(*(levels[k] for k in reversed_keys)):
        chosen = dict(zip(reversed_keys, combo))
        row: dict[str, Any] = {}
        for key, value in params.items():
            if key in chosen:
                row[key] = _detach(chosen[key])
            else:
                row[key] = _detach(_unwrap(value))
        out.append(row)
    return out


def expanded_count(params: Mapping[str, Any]) -> int:
    """Return how many mappings `expand(params)` produces."""
    levels = _expansion_levels(params)
    return math.prod(len(v) for v in levels.values())


def expansion_keys(params: Mapping[str, Any]) -> list[str]:
    """Return the keys of `params` that `expand` fans out, in key order."""
    return list(_expansion_levels(params))


def _expansion_levels(params: Mapping[str, Any]) -> dict[str, Sequence[Any]]:
    if not isinstance(params, Mapping):
        raise ParamExpansionError(
            code="E_EXPAND_NOT_MAPPING",
            message=f"parameters must be a mapping, got {type(params).__name__}",
        )

    levels: dict[str, Sequence[Any]] = {}
    for key, value in classify(params).items():
        if not isinstance(value, ExpandGroup):
            continue
        # ExpandGroup keeps non-iterable values as given
        if not isinstance(value.values, (list, tuple)):
            raise ParamExpansionError(
                code="E_EXPAND_NOT_ITERABLE",
                message=f"is marked for expansion but {type(value.values).__name__} is not iterable",
                path=str(key),
            )
        levels[key] = value.values
    return levels


def _unwrap(value: Any) -> Any:
    if isinstance(value, Scalar):
        return value.value
    return value


def _detach(value: Any) -> Any:
    """Copy containers so results do not share them; other values pass through.

    Containers holding objects that cannot be deep-copied (locks, open files)
    fall back to a shallow copy.
    """
    if not isinstance(value, (list, tuple, dict, set)):
        return value
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        return copy.copy(value)

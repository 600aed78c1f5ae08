from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union


@dataclass(frozen=True)
class Scalar:
    """A parameter value kept constant across an expansion."""

    value: Any


@dataclass(frozen=True)
class ExpandGroup:
    """A parameter value whose elements are fanned out by `expand`.

    Lists and tuples are kept as given. Any other iterable is read once, here,
    into a tuple so that repeated expansions see the same elements. A value
    that cannot be iterated is kept unchanged and rejected by `expand`.
    """

    values: Iterable[Any]

    def __post_init__(self) -> None:
        if isinstance(self.values, (list, tuple)):
            return
        try:
            materialized = tuple(self.values)
        except TypeError:
            return
        object.__setattr__(self, "values", materialized)


ParamValue = Union[Scalar, ExpandGroup]


def wrap_value(value: Any) -> ParamValue:
    """Classify a raw value.

    Only `list` counts as an expansion field. Tuples, ranges, strings and other
    iterables stay scalar. Values that are already wrapped are returned as is.
    """
    if isinstance(value, (Scalar, ExpandGroup)):
        return value
    if isinstance(value, list):
        return ExpandGroup(value)
    return Scalar(value)


def classify(params: Mapping[str, Any]) -> dict[str, ParamValue]:
    return {k: wrap_value(v) for k, v in params.items()}


@dataclass(frozen=True)
class RevisionInfo:
    commit: str
    dirty: bool = False

    @property
    def label(self) -> str:
        return f"{self.commit}_dirty" if self.dirty else self.commit


@dataclass(frozen=True)
class SourceLocation:
    """File and line of the code that requested a tag."""

    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}#{self.line}"

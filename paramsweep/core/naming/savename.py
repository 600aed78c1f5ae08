"""Deterministic names for parameter sets.

`savename` turns a mapping (or a dataclass instance) into a string such as
``"a=1_b=0.333_model=linear"``. Which fields take part, how they are looked
up and the default prefix can be customized per type by registering
implementations of the single-dispatch hooks below:

    @allaccess.register(MySim)
    def _(obj: MySim) -> list[str]:
        return ["N", "dt"]

    @default_prefix.register(MySim)
    def _(obj: MySim) -> str:
        return "mysim"
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from functools import singledispatch
from typing import Any, Iterable, Optional

DEFAULT_ALLOWED_TYPES: tuple[type, ...] = (int, float, str)


@singledispatch
def allaccess(obj: Any) -> list[str]:
    """Keys of `obj` that `savename` may include."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return [f.name for f in dataclasses.fields(obj)]
    raise TypeError(f"savename does not know how to list the fields of {type(obj).__name__}")


@allaccess.register(Mapping)
def _(obj: Mapping) -> list[str]:
    return list(obj.keys())


@singledispatch
def access(obj: Any, key: str) -> Any:
    return getattr(obj, key)


@access.register(Mapping)
def _(obj: Mapping, key: str) -> Any:
    return obj[key]


@singledispatch
def default_allowed(obj: Any) -> tuple[type, ...]:
    return DEFAULT_ALLOWED_TYPES


@singledispatch
def default_prefix(obj: Any) -> str:
    return ""


def savename(
    obj: Any,
    suffix: Optional[str] = None,
    *,
    prefix: Optional[str] = None,
    allowed_types: Optional[Iterable[type]] = None,
    accesses: Optional[Iterable[str]] = None,
    digits: int = 3,
    connector: str = "_",
) -> str:
    """Build a name from the fields of `obj`.

    Fields are sorted by key and rendered as ``key=value``; only values that are
    instances of `allowed_types` are kept. Floats are rounded to `digits`
    significant digits. A non-empty prefix is joined with `connector`, a suffix
    is appended after a dot.
    """

    if digits < 1:
        raise ValueError("digits must be >= 1")

    prefix = default_prefix(obj) if prefix is None else prefix
    allowed = tuple(default_allowed(obj) if allowed_types is None else allowed_types)
    keys = list(allaccess(obj) if accesses is None else accesses)

    parts: list[str] = []
    for key in sorted(keys, key=str):
        value = access(obj, key)
        if not isinstance(value, allowed):
            continue
        parts.append(f"{key}={_format_value(value, digits)}")

    name = connector.join(parts)
    if prefix:
        name = f"{prefix}{connector}{name}" if name else prefix
    if suffix:
        name = f"{name}.{suffix}" if name else suffix
    return name


def _format_value(value: Any, digits: int) -> str:
    if isinstance(value, float):
        return repr(float(f"{value:.{digits}g}"))
    return str(value)

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import yaml

from paramsweep.core.errors import ParamLoadError

# Parameter names come from mapping keys; these are the key types that have an
# unambiguous string form.
_KEY_TYPES = (str, int, float, bool)


class _DuplicateJsonKey(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in pairs:
        if k in out:
            raise _DuplicateJsonKey(k)
        out[k] = v
    return out


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _parse_json(text: str) -> Any:
    return json.loads(text, object_pairs_hook=_reject_duplicates)


_PARSERS: dict[str, Callable[[str], Any]] = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".json": _parse_json,
}


def load_params(path: str) -> dict[str, Any]:
    """Load a parameter file into a mapping of parameter name -> value.

    Rules:
      - .yaml/.yml/.json only; an empty YAML document is an empty mapping
      - the top level is a mapping whose keys are strings, numbers or booleans
      - keys become parameter names through str(); two keys with the same name
        (JSON duplicates, or YAML `1` and `"1"`) are an error, never merged
      - lists stay lists, so they expand; nothing else is coerced
    """

    p = Path(path)
    if not p.exists():
        raise ParamLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    parse = _PARSERS.get(p.suffix.lower())
    if parse is None:
        raise ParamLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message="supported formats are .yaml/.yml and .json",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:  # pragma: no cover
        raise ParamLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        data = parse(raw_text)
    except _DuplicateJsonKey as e:
        raise ParamLoadError(
            code="E_DUPLICATE_KEY",
            message="key appears more than once",
            file=str(p),
            path=e.key,
        ) from e
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise ParamLoadError(
            code="E_YAML_PARSE",
            message=str(getattr(e, "problem", None) or e),
            file=str(p),
            line=mark.line + 1 if mark is not None else None,
        ) from e
    except json.JSONDecodeError as e:
        raise ParamLoadError(code="E_JSON_PARSE", message=e.msg, file=str(p), line=e.lineno) from e

    if data is None and parse is _parse_yaml:
        return {}
    if not isinstance(data, dict):
        raise ParamLoadError(
            code="E_INVALID_TOP_LEVEL",
            message=f"top level must be a mapping of parameters, got {type(data).__name__}",
            file=str(p),
        )

    return _parameter_names(data, str(p))


def _parameter_names(data: dict[Any, Any], file: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    raw_keys: dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(key, _KEY_TYPES):
            raise ParamLoadError(
                code="E_INVALID_KEY",
                message=f"parameter names must be strings or numbers, got {type(key).__name__}",
                file=file,
                path=str(key),
            )
        name = str(key)
        if name in out:
            raise ParamLoadError(
                code="E_DUPLICATE_KEY",
                message=f"keys {raw_keys[name]!r} and {key!r} both name this parameter",
                file=file,
                path=name,
            )
        raw_keys[name] = key
        out[name] = value
    return out


def dump_params_yaml(params: Any, path: str) -> None:
    """Write a mapping (or a list of mappings) as YAML, keeping key order."""
    p = Path(path)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_params_text(params), encoding="utf-8")


def dump_params_text(params: Any) -> str:
    return yaml.safe_dump(params, sort_keys=False, default_flow_style=False, allow_unicode=True)

"""Chart values: flat ``--set`` mappings and YAML values files.

Test cases describe chart configuration as a flat mapping of string keys to
string values, the same shape ``helm template --set`` accepts:

- dots nest maps (``application.database_url``)
- ``[N]`` indexes list elements (``image.secrets[0].name``)
- a backslash escapes a literal dot (``extraLabels.app\\.kubernetes\\.io/tier``)

:func:`parse_set_values` expands such a mapping into the nested structure Helm
builds before coalescing it with the chart defaults. Value typing follows Helm:
``null`` removes the default, ``true``/``false`` become booleans and integer
literals become ints.

Examples
--------
>>> merge_values({"gitlab.env": "prod"}, {"gitlab.env": "staging"})
{'gitlab.env': 'staging'}
>>> parse_set_values({"image.secrets[1].name": "extra"})
{'image': {'secrets': [None, {'name': 'extra'}]}}

"""

from __future__ import annotations

import io
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from chartprobe.errors import ValuesError

if typ.TYPE_CHECKING:
    from collections.abc import Mapping

YAML_VERSION = (1, 2)

_INT_RE = re.compile(r"-?(0|[1-9][0-9]*)")

Segment = str | int


def merge_values(
    base: Mapping[str, str], overrides: Mapping[str, str]
) -> dict[str, str]:
    """Return ``base`` updated with ``overrides``; override wins on collision.

    Neither input is modified.
    """
    return {**base, **overrides}


def to_set_args(values: Mapping[str, str]) -> list[str]:
    """Convert a flat values mapping into repeated ``--set`` arguments.

    Backslashes and commas are escaped because Helm treats a backslash as an
    escape character and an unescaped comma as a separator between
    assignments.

    Parameters
    ----------
    values : Mapping[str, str]
        Flat chart values in insertion order.

    Returns
    -------
    list[str]
        ``["--set", "key=value", ...]``.

    """
    args: list[str] = []
    for key, value in values.items():
        escaped = value.replace("\\", "\\\\").replace(",", "\\,")
        args.extend(["--set", f"{key}={escaped}"])
    return args


def split_key(key: str) -> list[Segment]:
    """Split a dotted, bracket-indexed key into map keys and list indexes.

    Raises
    ------
    ValuesError
        If the key is empty, has an empty segment, an unterminated or
        non-numeric index, or text directly after an index.

    """
    if not key:
        msg = "chart value key must not be empty"
        raise ValuesError(msg)

    segments: list[Segment] = []
    name: list[str] = []
    # "start", "name", "dot" or "index": what the previous token was.
    previous = "start"
    pos = 0
    while pos < len(key):
        char = key[pos]
        if char == "\\" and pos + 1 < len(key):
            if previous == "index":
                msg = f"expected '.' or '[' after index in key {key!r}"
                raise ValuesError(msg)
            name.append(key[pos + 1])
            previous = "name"
            pos += 2
        elif char == ".":
            if previous not in {"name", "index"}:
                msg = f"empty segment in key {key!r}"
                raise ValuesError(msg)
            if name:
                segments.append("".join(name))
                name = []
            previous = "dot"
            pos += 1
        elif char == "[":
            end = key.find("]", pos)
            if end == -1:
                msg = f"unterminated index in key {key!r}"
                raise ValuesError(msg)
            raw_index = key[pos + 1 : end]
            if not raw_index.isdigit():
                msg = f"list index must be a non-negative integer in key {key!r}"
                raise ValuesError(msg)
            if previous not in {"name", "index"}:
                msg = f"index without a list name in key {key!r}"
                raise ValuesError(msg)
            if name:
                segments.append("".join(name))
                name = []
            segments.append(int(raw_index))
            previous = "index"
            pos = end + 1
        else:
            if previous == "index":
                msg = f"expected '.' or '[' after index in key {key!r}"
                raise ValuesError(msg)
            name.append(char)
            previous = "name"
            pos += 1

    if previous == "dot":
        msg = f"empty segment in key {key!r}"
        raise ValuesError(msg)
    if name:
        segments.append("".join(name))
    return segments


def coerce_value(raw: str) -> object:
    """Type a ``--set`` value the way Helm does.

    ``null``, ``true`` and ``false`` match regardless of case.
    """
    lowered = raw.lower()
    if lowered == "null":
        return None
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.fullmatch(raw):
        return int(raw)
    return raw


def parse_set_values(values: Mapping[str, str]) -> dict[str, object]:
    """Expand flat ``--set`` style values into a nested values tree.

    Parameters
    ----------
    values : Mapping[str, str]
        Flat chart values keyed by dotted / indexed paths.

    Returns
    -------
    dict[str, object]
        Nested mapping suitable for a Helm values file. Missing list slots
        before an assigned index are filled with ``None``.

    Raises
    ------
    ValuesError
        If a key is malformed or two keys disagree on the shape of a path.

    """
    tree: dict[str, object] = {}
    for key, raw in values.items():
        segments = split_key(key)
        if isinstance(segments[0], int):
            msg = f"top-level key must be a name in key {key!r}"
            raise ValuesError(msg)
        node: dict[str, object] | list[object] = tree
        for current, following in zip(segments, segments[1:], strict=False):
            node = _descend(node, current, following, key)
        _store(node, segments[-1], coerce_value(raw), key)
    return tree


def _descend(
    node: dict[str, object] | list[object],
    segment: Segment,
    following: Segment,
    key: str,
) -> dict[str, object] | list[object]:
    """Return the child container at ``segment``, creating it when missing."""
    wants_list = isinstance(following, int)
    existing = _lookup(node, segment, key)
    if existing is None:
        child: dict[str, object] | list[object] = [] if wants_list else {}
        _store(node, segment, child, key)
        return child
    if wants_list and isinstance(existing, list):
        return existing
    if not wants_list and isinstance(existing, dict):
        return existing
    msg = f"key {key!r} conflicts with a previously set value"
    raise ValuesError(msg)


def _lookup(
    node: dict[str, object] | list[object], segment: Segment, key: str
) -> object:
    if isinstance(node, dict):
        if not isinstance(segment, str):
            msg = f"key {key!r} indexes a map as a list"
            raise ValuesError(msg)
        return node.get(segment)
    if not isinstance(segment, int):
        msg = f"key {key!r} uses a list as a map"
        raise ValuesError(msg)
    return node[segment] if segment < len(node) else None


def _store(
    node: dict[str, object] | list[object],
    segment: Segment,
    value: object,
    key: str,
) -> None:
    if isinstance(node, dict):
        if not isinstance(segment, str):
            msg = f"key {key!r} indexes a map as a list"
            raise ValuesError(msg)
        node[segment] = value
        return
    if not isinstance(segment, int):
        msg = f"key {key!r} uses a list as a map"
        raise ValuesError(msg)
    if segment >= len(node):
        node.extend([None] * (segment + 1 - len(node)))
    node[segment] = value


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    yaml.default_flow_style = False
    return yaml


def _dumper() -> YAML:
    # Helm's YAML parser rejects a %YAML 1.2 directive, so none is emitted.
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    return yaml


def load_values_file(path: Path | str) -> dict[str, object]:
    """Read a YAML values file; an empty file yields an empty mapping."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        msg = f"failed to read values file {path_obj}: {exc}"
        raise ValuesError(msg) from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"values file {path_obj} must contain a mapping"
        raise ValuesError(msg)
    return loaded


def format_values_yaml(values: Mapping[str, object]) -> str:
    """Render a nested values mapping as block-style YAML text."""
    buffer = io.StringIO()
    _dumper().dump(dict(values), buffer)
    return buffer.getvalue()


def dump_values_file(values: Mapping[str, object], path: Path | str) -> Path:
    """Write a nested values mapping as YAML and return the path written."""
    path_obj = Path(path)
    path_obj.write_text(format_values_yaml(values), encoding="utf-8")
    return path_obj


__all__ = [
    "coerce_value",
    "dump_values_file",
    "format_values_yaml",
    "load_values_file",
    "merge_values",
    "parse_set_values",
    "split_key",
    "to_set_args",
]

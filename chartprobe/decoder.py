"""Decode ``helm template`` output into typed workload objects."""

from __future__ import annotations

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from chartprobe.errors import ManifestDecodeError
from chartprobe.manifests import Workload, WorkloadList

YAML_VERSION = (1, 2)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    return yaml


def load_documents(text: str) -> list[dict]:
    """Parse multi-document YAML and drop empty documents.

    Helm separates resources with ``---`` and emits an empty document for a
    template that renders nothing.

    Raises
    ------
    ManifestDecodeError
        If the text is not valid YAML or a document is not a mapping.

    """
    try:
        docs = [doc for doc in _yaml().load_all(text) if doc is not None]
    except YAMLError as exc:
        msg = f"failed to parse rendered YAML: {exc}"
        raise ManifestDecodeError(msg) from exc

    for doc in docs:
        if not isinstance(doc, dict):
            msg = f"rendered document is not a mapping: {doc!r}"
            raise ManifestDecodeError(msg)
    return docs


def _convert(doc: dict) -> Workload:
    try:
        return msgspec.convert(doc, type=Workload)
    except msgspec.ValidationError as exc:
        msg = f"schema validation failed: {exc}"
        raise ManifestDecodeError(msg) from exc


def decode_workload(text: str) -> Workload:
    """Decode a render that must contain exactly one resource.

    Raises
    ------
    ManifestDecodeError
        If the YAML is invalid, does not match the workload schema, or holds
        zero or several documents.

    """
    docs = load_documents(text)
    if len(docs) != 1:
        msg = f"expected exactly one rendered document, found {len(docs)}"
        raise ManifestDecodeError(msg)
    return _convert(docs[0])


def decode_workloads(text: str) -> WorkloadList:
    """Decode every resource in a render, flattening ``kind: List`` wrappers.

    Raises
    ------
    ManifestDecodeError
        If the YAML is invalid, a document does not match the workload schema
        or the render is empty.

    """
    docs = load_documents(text)
    if not docs:
        msg = "rendered output contains no documents"
        raise ManifestDecodeError(msg)

    items: list[Workload] = []
    for doc in docs:
        if doc.get("kind") == "List":
            items.extend(_convert(item) for item in doc.get("items") or [])
        else:
            items.append(_convert(doc))
    return WorkloadList(items=items)


__all__ = [
    "decode_workload",
    "decode_workloads",
    "load_documents",
]

"""Encode/decode Python values to/from Firestore REST API 'fields' format.

Writes are encoded as ``documents:commit`` Write objects: plain values go
into ``update.fields``, sentinels become an update mask entry
(DELETE_FIELD) or a field transform (SERVER_TIMESTAMP, Increment).
"""

import base64
import re
from datetime import datetime
from typing import Any, Literal

from ca_admin.application.dtos.store import DELETE_FIELD, SERVER_TIMESTAMP, Increment
from ca_admin.shared.utils.datetime import ensure_utc

WriteMode = Literal["set", "merge", "update"]

_SIMPLE_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")
# Firestore returns nanosecond precision; datetime keeps microseconds.
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": None}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": ensure_utc(v).strftime("%Y-%m-%dT%H:%M:%S.%fZ")}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: _encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_fields(data: dict[str, Any]) -> dict:
    """Convert a Python dict (no sentinels) to Firestore REST Document.fields."""
    return {k: _encode_value(v) for k, v in data.items()}


def field_path(key: str) -> str:
    """Quote a top-level field name for use in masks and transforms."""
    if _SIMPLE_FIELD_RE.match(key):
        return key
    escaped = key.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def encode_write(
    name: str,
    data: dict[str, Any],
    mode: WriteMode = "set",
    *,
    must_exist: bool | None = None,
) -> dict:
    """Build one Write for ``documents:commit``.

    Args:
        name: Full resource name of the document.
        data: Field values; top-level sentinels are split out.
        mode: 'set' replaces the document, 'merge' and 'update' only touch
            the given fields ('update' also requires the document to exist).
        must_exist: Explicit exists precondition (False for create).

    Raises:
        TypeError: DELETE_FIELD used in a full replace, or an unsupported value.
    """
    fields: dict[str, Any] = {}
    mask: list[str] = []
    transforms: list[dict] = []
    for key, value in data.items():
        path = field_path(key)
        if value is SERVER_TIMESTAMP:
            transforms.append({"fieldPath": path, "setToServerValue": "REQUEST_TIME"})
        elif isinstance(value, Increment):
            transforms.append(
                {"fieldPath": path, "increment": {"integerValue": str(value.amount)}}
            )
        elif value is DELETE_FIELD:
            if mode == "set":
                raise TypeError("DELETE_FIELD is only allowed in merge or update writes")
            mask.append(path)
        else:
            fields[key] = _encode_value(value)
            mask.append(path)

    write: dict[str, Any] = {"update": {"name": name, "fields": fields}}
    if mode != "set":
        write["updateMask"] = {"fieldPaths": mask}
    if transforms:
        write["updateTransforms"] = transforms
    if mode == "update":
        must_exist = True
    if must_exist is not None:
        write["currentDocument"] = {"exists": must_exist}
    return write


def encode_delete(name: str) -> dict:
    return {"delete": name}


def _decode_value(obj: dict) -> Any:
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        raw = _FRACTION_RE.sub(r".\1", obj["timestampValue"])
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "referenceValue" in obj:
        return obj["referenceValue"]
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [_decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: _decode_value(x) for k, x in fields.items()}
    return None


def decode_fields(fields: dict | None) -> dict:
    """Convert Firestore REST Document.fields to a Python dict."""
    if not fields:
        return {}
    return {k: _decode_value(v) for k, v in fields.items()}


def decode_document(doc: dict) -> tuple[str, dict]:
    """Return (relative path, data) for a REST Document resource.

    The relative path is the part of ``name`` after ``/documents/``.
    """
    name = doc.get("name", "")
    _, _, relative = name.partition("/documents/")
    return relative, decode_fields(doc.get("fields"))

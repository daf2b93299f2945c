"""Tests for Firestore REST value encoding and commit Write construction."""

import base64
from datetime import datetime, timezone

import pytest

from ca_admin.application.dtos.store import DELETE_FIELD, SERVER_TIMESTAMP, Increment
from ca_admin.infrastructure.firebase._rest_encoding import (
    decode_document,
    decode_fields,
    encode_delete,
    encode_fields,
    encode_write,
    field_path,
)

NAME = "projects/p/databases/(default)/documents/tenants/t1/clients/c1"


def test_encode_fields_value_types() -> None:
    when = datetime(2024, 4, 1, 10, 30, tzinfo=timezone.utc)
    fields = encode_fields(
        {
            "active": True,
            "count": 3,
            "ratio": 0.5,
            "name": "Asha",
            "none": None,
            "at": when,
            "years": ["2024-25"],
            "meta": {"k": 1},
            "raw": b"\x00\x01",
        }
    )
    assert fields["active"] == {"booleanValue": True}
    assert fields["count"] == {"integerValue": "3"}
    assert fields["ratio"] == {"doubleValue": 0.5}
    assert fields["none"] == {"nullValue": None}
    assert fields["at"] == {"timestampValue": "2024-04-01T10:30:00.000000Z"}
    assert fields["years"] == {"arrayValue": {"values": [{"stringValue": "2024-25"}]}}
    assert fields["meta"] == {"mapValue": {"fields": {"k": {"integerValue": "1"}}}}
    assert fields["raw"] == {"bytesValue": base64.standard_b64encode(b"\x00\x01").decode()}


def test_encode_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_fields({"bad": object()})


def test_field_path_quotes_non_simple_names() -> None:
    assert field_path("documentCount") == "documentCount"
    assert field_path("a.b") == "`a.b`"
    assert field_path("we`ird") == "`we\\`ird`"


def test_set_write_has_no_mask() -> None:
    write = encode_write(NAME, {"name": "Asha"}, "set")
    assert write == {"update": {"name": NAME, "fields": {"name": {"stringValue": "Asha"}}}}


def test_create_write_has_exists_false_precondition() -> None:
    write = encode_write(NAME, {"name": "Asha", "createdAt": SERVER_TIMESTAMP}, "set", must_exist=False)
    assert write["currentDocument"] == {"exists": False}
    assert write["updateTransforms"] == [{"fieldPath": "createdAt", "setToServerValue": "REQUEST_TIME"}]
    assert "createdAt" not in write["update"]["fields"]


def test_update_write_masks_fields_and_requires_existence() -> None:
    write = encode_write(
        NAME,
        {"name": "Asha", "fcmToken": DELETE_FIELD, "documentCount": Increment(-1)},
        "update",
    )
    assert write["updateMask"] == {"fieldPaths": ["name", "fcmToken"]}
    assert write["update"]["fields"] == {"name": {"stringValue": "Asha"}}
    assert write["updateTransforms"] == [
        {"fieldPath": "documentCount", "increment": {"integerValue": "-1"}}
    ]
    assert write["currentDocument"] == {"exists": True}


def test_merge_write_has_mask_without_precondition() -> None:
    write = encode_write(NAME, {"isActive": True}, "merge")
    assert write["updateMask"] == {"fieldPaths": ["isActive"]}
    assert "currentDocument" not in write


def test_delete_field_not_allowed_in_set() -> None:
    with pytest.raises(TypeError):
        encode_write(NAME, {"fcmToken": DELETE_FIELD}, "set")


def test_encode_delete() -> None:
    assert encode_delete(NAME) == {"delete": NAME}


def test_decode_fields() -> None:
    data = decode_fields(
        {
            "n": {"integerValue": "42"},
            "at": {"timestampValue": "2024-04-01T10:30:00.123456789Z"},
            "ref": {"referenceValue": "projects/p/databases/(default)/documents/a/b"},
            "tags": {"arrayValue": {}},
            "m": {"mapValue": {"fields": {"x": {"booleanValue": False}}}},
            "null": {"nullValue": None},
        }
    )
    assert data["n"] == 42
    assert data["at"] == datetime(2024, 4, 1, 10, 30, 0, 123456, tzinfo=timezone.utc)
    assert data["ref"].endswith("/documents/a/b")
    assert data["tags"] == []
    assert data["m"] == {"x": False}
    assert data["null"] is None
    assert decode_fields(None) == {}


def test_decode_document_returns_relative_path() -> None:
    path, data = decode_document({"name": NAME, "fields": {"name": {"stringValue": "Asha"}}})
    assert path == "tenants/t1/clients/c1"
    assert data == {"name": "Asha"}

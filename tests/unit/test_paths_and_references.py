"""Tests for tenant id derivation, path resolution and the reference builder."""

import pytest

from ca_admin.domain.exceptions import ValidationException
from ca_admin.infrastructure.firebase.paths import (
    email_from_tenant_id,
    normalize_tenant,
    resolve_segments,
    tenant_id_from_email,
)
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require

EMAIL = "a.b@x.com"
TID = "a_b@x_com"


def test_tenant_id_replaces_dots() -> None:
    assert tenant_id_from_email(EMAIL) == TID
    assert tenant_id_from_email("  a.b@x.com ") == TID
    assert tenant_id_from_email(TID) == TID
    assert normalize_tenant(EMAIL) == normalize_tenant(TID) == TID


@pytest.mark.parametrize("raw", [None, "", "   ", "a/b@x.com"])
def test_tenant_id_rejects_unusable(raw) -> None:
    assert tenant_id_from_email(raw) is None


def test_email_from_tenant_id_restores_domain() -> None:
    assert email_from_tenant_id("asha@firm_co_in") == "asha@firm.co.in"
    assert email_from_tenant_id(EMAIL) == EMAIL
    # local-part underscores cannot be told apart from dots
    assert email_from_tenant_id(TID) == "a_b@x.com"


def test_resolve_segments_truncates_after_last_identifier() -> None:
    assert resolve_segments("tenants", EMAIL) == ["tenants", TID]
    assert resolve_segments("tenants", EMAIL, "9876543210", "2024-25") == [
        "tenants", TID, "clients", "9876543210", "years", "2024-25",
    ]


@pytest.mark.parametrize(
    "args",
    [
        (None,),
        (EMAIL, None, "2024-25"),
        (EMAIL, "9876543210", None, "doc1"),
        (EMAIL, "", "2024-25"),
        (EMAIL, "98/76"),
    ],
)
def test_resolve_segments_none_for_missing_or_bad_identifiers(args) -> None:
    assert resolve_segments("tenants", *args) is None


def test_reference_paths() -> None:
    refs = ReferenceBuilder()
    base = f"tenants/{TID}"
    assert refs.tenant(EMAIL).path == base
    assert refs.profile(EMAIL).path == f"{base}/profile/main"
    assert refs.clients(EMAIL).path == f"{base}/clients"
    assert refs.client(EMAIL, "9876543210").path == f"{base}/clients/9876543210"
    assert refs.years(EMAIL, "9876543210").path == f"{base}/clients/9876543210/years"
    assert refs.year(EMAIL, "9876543210", "2024-25").path == f"{base}/clients/9876543210/years/2024-25"
    assert (
        refs.documents(EMAIL, "9876543210", "2024-25").path
        == f"{base}/clients/9876543210/years/2024-25/documents"
    )
    assert (
        refs.document(EMAIL, "9876543210", "2024-25", "d1").path
        == f"{base}/clients/9876543210/years/2024-25/documents/d1"
    )
    assert (
        refs.generic_document(EMAIL, "9876543210", "g1").path
        == f"{base}/clients/9876543210/genericDocuments/g1"
    )
    assert refs.notification(EMAIL, "n1").path == f"{base}/notifications/n1"
    assert refs.banners(EMAIL).path == f"{base}/banners"
    assert refs.admin_images(EMAIL).path == f"{base}/admin/uploadedImages/images"


def test_reference_builder_returns_none_for_missing_parents() -> None:
    refs = ReferenceBuilder()
    assert refs.tenant(None) is None
    assert refs.client(EMAIL, None) is None
    assert refs.client(None, "9876543210") is None
    assert refs.year(EMAIL, None, "2024-25") is None
    assert refs.documents(EMAIL, "9876543210", None) is None
    assert refs.document(EMAIL, "9876543210", "2024-25", None) is None
    assert refs.generic_documents(EMAIL, "") is None
    assert refs.notification(EMAIL, "") is None


def test_legacy_references() -> None:
    refs = ReferenceBuilder(legacy_tenant_root="ca_admin")
    assert refs.legacy_client(EMAIL, "9876543210").path == f"ca_admin/{TID}/clients/9876543210"
    assert refs.legacy_user(EMAIL).path == f"{TID}/user"
    assert refs.legacy_source(TID, "banners").path == f"{TID}/user/banners"
    assert refs.legacy_source(None, "banners") is None


def test_custom_roots() -> None:
    refs = ReferenceBuilder(tenant_root="firms")
    assert refs.clients(EMAIL).path == f"firms/{TID}/clients"


def test_require() -> None:
    refs = ReferenceBuilder()
    assert require(refs.tenant(EMAIL)) == refs.tenant(EMAIL)
    with pytest.raises(ValidationException) as exc_info:
        require(refs.client(EMAIL, None), "contact")
    assert exc_info.value.details == {"field": "contact"}

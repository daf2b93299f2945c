"""Typed references into the tenant hierarchy.

ReferenceBuilder turns business identifiers into CollectionPath /
DocumentPath handles. Every method returns None when an identifier is
missing or unusable, so callers check once instead of catching.
"""

from typing import TypeVar

from ca_admin.domain.exceptions import ValidationException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase.collections import (
    COLLECTION_ADMIN,
    COLLECTION_BANNERS,
    COLLECTION_CLIENTS,
    COLLECTION_DOCUMENTS,
    COLLECTION_GENERIC_DOCUMENTS,
    COLLECTION_IMAGES,
    COLLECTION_NOTIFICATIONS,
    COLLECTION_PROFILE,
    COLLECTION_UPLOADED_IMAGES,
    COLLECTION_YEARS,
    LEGACY_USER_DOCUMENT,
    PROFILE_DOCUMENT_ID,
)
from ca_admin.infrastructure.firebase.paths import (
    clean_segment,
    resolve_segments,
    tenant_id_from_email,
)

RefT = TypeVar("RefT", CollectionPath, DocumentPath)


def client_years(client: DocumentPath) -> CollectionPath:
    return client.collection(COLLECTION_YEARS)


def year_documents(year: DocumentPath) -> CollectionPath:
    return year.collection(COLLECTION_DOCUMENTS)


def client_generic_documents(client: DocumentPath) -> CollectionPath:
    return client.collection(COLLECTION_GENERIC_DOCUMENTS)


def admin_images(admin: CollectionPath) -> CollectionPath:
    """``admin/uploadedImages/images``: images hang off a fixed admin document."""
    return admin.document(COLLECTION_UPLOADED_IMAGES).collection(COLLECTION_IMAGES)


class ReferenceBuilder:
    """Builds references under a canonical root and a legacy client root."""

    def __init__(self, tenant_root: str = "tenants", legacy_tenant_root: str = "ca_admin") -> None:
        self.tenant_root = tenant_root
        self.legacy_tenant_root = legacy_tenant_root

    @staticmethod
    def _doc(segments: list[str] | None) -> DocumentPath | None:
        return DocumentPath(tuple(segments)) if segments else None

    # Tenant level

    def tenant(self, email: str | None) -> DocumentPath | None:
        return self._doc(resolve_segments(self.tenant_root, email))

    def profile(self, email: str | None) -> DocumentPath | None:
        tenant = self.tenant(email)
        if tenant is None:
            return None
        return tenant.collection(COLLECTION_PROFILE).document(PROFILE_DOCUMENT_ID)

    def clients(self, email: str | None) -> CollectionPath | None:
        tenant = self.tenant(email)
        return tenant.collection(COLLECTION_CLIENTS) if tenant else None

    def notifications(self, email: str | None) -> CollectionPath | None:
        tenant = self.tenant(email)
        return tenant.collection(COLLECTION_NOTIFICATIONS) if tenant else None

    def notification(self, email: str | None, notification_id: str | None) -> DocumentPath | None:
        coll = self.notifications(email)
        doc_id = clean_segment(notification_id)
        return coll.document(doc_id) if coll and doc_id else None

    def banners(self, email: str | None) -> CollectionPath | None:
        tenant = self.tenant(email)
        return tenant.collection(COLLECTION_BANNERS) if tenant else None

    def admin(self, email: str | None) -> CollectionPath | None:
        tenant = self.tenant(email)
        return tenant.collection(COLLECTION_ADMIN) if tenant else None

    def admin_images(self, email: str | None) -> CollectionPath | None:
        admin = self.admin(email)
        return admin_images(admin) if admin else None

    # Client level

    def client(self, email: str | None, contact: str | None) -> DocumentPath | None:
        if contact is None:
            return None
        return self._doc(resolve_segments(self.tenant_root, email, contact))

    def years(self, email: str | None, contact: str | None) -> CollectionPath | None:
        client = self.client(email, contact)
        return client_years(client) if client else None

    def year(self, email: str | None, contact: str | None, year: str | None) -> DocumentPath | None:
        if contact is None or year is None:
            return None
        return self._doc(resolve_segments(self.tenant_root, email, contact, year))

    def documents(
        self, email: str | None, contact: str | None, year: str | None
    ) -> CollectionPath | None:
        year_ref = self.year(email, contact, year)
        return year_documents(year_ref) if year_ref else None

    def document(
        self,
        email: str | None,
        contact: str | None,
        year: str | None,
        document_id: str | None,
    ) -> DocumentPath | None:
        if contact is None or year is None or document_id is None:
            return None
        return self._doc(resolve_segments(self.tenant_root, email, contact, year, document_id))

    def generic_documents(self, email: str | None, contact: str | None) -> CollectionPath | None:
        client = self.client(email, contact)
        return client_generic_documents(client) if client else None

    def generic_document(
        self, email: str | None, contact: str | None, document_id: str | None
    ) -> DocumentPath | None:
        coll = self.generic_documents(email, contact)
        doc_id = clean_segment(document_id)
        return coll.document(doc_id) if coll and doc_id else None

    # Legacy locations

    def legacy_client(self, email: str | None, contact: str | None) -> DocumentPath | None:
        """Client written by the previous console: ``{legacy_root}/{tenantId}/clients/{contact}``."""
        if contact is None:
            return None
        return self._doc(resolve_segments(self.legacy_tenant_root, email, contact))

    def legacy_user(self, email: str | None) -> DocumentPath | None:
        """Root of the flat layout: ``{tenantId}/user``."""
        tenant_id = tenant_id_from_email(email)
        return DocumentPath((tenant_id, LEGACY_USER_DOCUMENT)) if tenant_id else None

    def legacy_source(self, email: str | None, collection: str) -> CollectionPath | None:
        """A flat-layout source collection: ``{tenantId}/user/{collection}``."""
        user = self.legacy_user(email)
        name = clean_segment(collection)
        return user.collection(name) if user and name else None


def require(ref: RefT | None, field: str = "tenant") -> RefT:
    """Return ``ref`` or raise ValidationException naming the missing identifier."""
    if ref is None:
        raise ValidationException(f"A valid {field} identifier is required", field=field)
    return ref

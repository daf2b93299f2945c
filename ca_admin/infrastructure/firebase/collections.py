"""Firestore collection names (schema-in-code).

Firestore has no DDL. Collections are created automatically on first
write; these constants are the single source of truth for the hierarchy:

    {tenant_root}/{tenantId}/profile/main
    {tenant_root}/{tenantId}/clients/{contact}/years/{year}/documents/{docId}
    {tenant_root}/{tenantId}/clients/{contact}/genericDocuments/{docId}
    {tenant_root}/{tenantId}/notifications/{id}
    {tenant_root}/{tenantId}/banners/{id}
    {tenant_root}/{tenantId}/admin/uploadedImages/images/{id}

Legacy flat layout (migration source):

    {tenantId}/user/{clients|banners|admin}/...
"""

COLLECTION_PROFILE = "profile"
COLLECTION_CLIENTS = "clients"
COLLECTION_YEARS = "years"
COLLECTION_DOCUMENTS = "documents"
COLLECTION_GENERIC_DOCUMENTS = "genericDocuments"
COLLECTION_NOTIFICATIONS = "notifications"
COLLECTION_BANNERS = "banners"
COLLECTION_ADMIN = "admin"
COLLECTION_UPLOADED_IMAGES = "uploadedImages"
COLLECTION_IMAGES = "images"

# Legacy flat layout
LEGACY_USER_DOCUMENT = "user"

PROFILE_DOCUMENT_ID = "main"

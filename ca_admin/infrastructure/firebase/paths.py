"""Path resolution from business identifiers (pure, no I/O).

Tenant id is the owner's email with every '.' replaced by '_', so it can
be used as a single path segment. Deeper identifiers are only honoured
when every parent identifier is present; anything unusable resolves to
None rather than raising.
"""

from ca_admin.infrastructure.firebase.collections import (
    COLLECTION_CLIENTS,
    COLLECTION_DOCUMENTS,
    COLLECTION_YEARS,
)


def clean_segment(value: str | None) -> str | None:
    """Trimmed segment, or None when empty or containing '/'."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or "/" in text:
        return None
    return text


def tenant_id_from_email(email: str | None) -> str | None:
    """Safe tenant id for an email ('a.b@x.com' -> 'a_b@x_com')."""
    text = clean_segment(email)
    if text is None:
        return None
    return text.replace(".", "_")


def email_from_tenant_id(value: str) -> str:
    """Best-effort inverse of tenant_id_from_email.

    A value containing '.' is taken as a raw email. Otherwise '_' is turned
    back into '.' in the domain part only; underscores in the local part
    are kept (the original local part cannot be recovered exactly).
    """
    text = value.strip()
    if "." in text:
        return text
    local, sep, domain = text.partition("@")
    if not sep:
        return text
    return f"{local}@{domain.replace('_', '.')}"


def normalize_tenant(value: str | None) -> str | None:
    """Accept a raw email or an already-safe tenant id; return the safe id."""
    return tenant_id_from_email(value)


def resolve_segments(
    tenant_root: str,
    tenant_email: str | None,
    client_contact: str | None = None,
    year: str | None = None,
    document_id: str | None = None,
) -> list[str] | None:
    """Canonical segments for the deepest identifier given.

    ``[root, tenantId, "clients", contact, "years", year, "documents", docId]``
    truncated after the last supplied identifier. Returns None when the
    tenant is missing, a deeper identifier is supplied without its parent,
    or any identifier is unusable as a segment.
    """
    tenant_id = tenant_id_from_email(tenant_email)
    if tenant_id is None:
        return None
    segments = [tenant_root, tenant_id]
    chain = (
        (COLLECTION_CLIENTS, client_contact),
        (COLLECTION_YEARS, year),
        (COLLECTION_DOCUMENTS, document_id),
    )
    missing_parent = False
    for collection, raw in chain:
        if raw is None:
            missing_parent = True
            continue
        if missing_parent:
            return None
        value = clean_segment(raw)
        if value is None:
            return None
        segments.extend((collection, value))
    return segments

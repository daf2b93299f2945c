"""Store-backed repositories for clients, years, documents, notifications and banners."""

from ca_admin.infrastructure.firebase.repositories.banner_repo import BannerRepository
from ca_admin.infrastructure.firebase.repositories.client_repo import ClientRepository
from ca_admin.infrastructure.firebase.repositories.document_repo import DocumentRepository
from ca_admin.infrastructure.firebase.repositories.notification_repo import NotificationRepository
from ca_admin.infrastructure.firebase.repositories.year_repo import YearRepository

__all__ = [
    "BannerRepository",
    "ClientRepository",
    "DocumentRepository",
    "NotificationRepository",
    "YearRepository",
]

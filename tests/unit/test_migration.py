"""Tests for MigrationService and BoundedBatch."""

import math

import pytest

from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath
from ca_admin.infrastructure.firebase.services import BoundedBatch, MigrationService
from tests.fakes import FaultyStore, seed_legacy_tenant

TID = "a_b@x_com"
# profile + 2 clients + 2 years + 3 documents + 1 generic + 1 banner + 2 admin + 1 image
EXPECTED_OPERATIONS = 13


async def test_migrate_tenant_rewrites_hierarchy(store, refs) -> None:
    await seed_legacy_tenant(store, TID)

    summary = await MigrationService(store, refs).migrate_all(["a.b@x.com"])

    assert summary.success
    (result,) = summary.results
    assert result.tenant == TID
    assert result.operation_count == EXPECTED_OPERATIONS
    assert result.commits == 1

    doc = await store.get(refs.document("a.b@x.com", "9876543210", "2023-24", "2023-24-0"))
    assert doc.data["fileName"] == "0.pdf"
    assert doc.data["migratedFrom"] == f"{TID}/user/clients/9876543210/years/2023-24/documents/2023-24-0"
    assert "migratedAt" in doc.data
    assert await store.get(refs.generic_document("a.b@x.com", "9876543210", "g1")) is not None
    images = await store.list(refs.admin_images("a.b@x.com"))
    assert [r.id for r in images] == ["img1"]

    profile = (await store.get(refs.profile(TID))).data
    assert profile["email"] == "a.b@x.com"
    assert profile["name"] == "a.b"
    assert profile["role"] == "user"
    # legacy source is left in place
    assert await store.get(refs.legacy_user(TID).collection("banners").document("b1")) is not None


async def test_verify_tenant_counts(store, refs) -> None:
    await seed_legacy_tenant(store, TID)
    migration = MigrationService(store, refs)
    await migration.migrate_all([TID])

    v = await migration.verify_tenant(TID)
    assert v.profile
    assert (v.clients, v.years, v.documents, v.generic_documents) == (2, 2, 3, 1)
    assert (v.banners, v.admin) == (1, 2)
    assert v.error is None


async def test_migration_is_idempotent(store, refs) -> None:
    await seed_legacy_tenant(store, TID)
    migration = MigrationService(store, refs)
    await migration.migrate_all([TID])
    paths_after_first = store.paths()
    first = await migration.verify_tenant(TID)

    summary = await migration.migrate_all([TID])

    assert summary.success
    assert store.paths() == paths_after_first
    assert await migration.verify_tenant(TID) == first


@pytest.mark.parametrize("limit", [1, 3, 5, 13, 500])
async def test_commits_split_at_batch_limit(store, refs, limit) -> None:
    await seed_legacy_tenant(store, TID)

    summary = await MigrationService(store, refs, batch_limit=limit).migrate_all([TID])

    (result,) = summary.results
    assert result.operation_count == EXPECTED_OPERATIONS
    assert result.commits == math.ceil(EXPECTED_OPERATIONS / limit)
    assert store.commit_count == result.commits


async def test_unreadable_subcollection_is_skipped(refs) -> None:
    store = FaultyStore()
    await seed_legacy_tenant(store, TID)
    store.fail_list.add(f"{TID}/user/banners")

    summary = await MigrationService(store, refs).migrate_all([TID])

    assert summary.success
    assert summary.results[0].operation_count == EXPECTED_OPERATIONS - 1
    assert len(summary.errors) == 1
    assert f"{TID}/user/banners" in summary.errors[0].message


async def test_failed_tenant_does_not_stop_others(refs) -> None:
    store = FaultyStore()
    await seed_legacy_tenant(store, "bad@x_com")
    await seed_legacy_tenant(store, "good@x_com")
    store.fail_commit_containing = "bad@x_com"

    summary = await MigrationService(store, refs, commit_attempts=2).migrate_all(
        ["bad@x.com", "good@x.com"]
    )

    assert not summary.success
    assert (summary.success_count, summary.failure_count) == (1, 1)
    bad, good = summary.results
    assert not bad.success
    assert bad.error == "commit rejected"
    assert good.success
    assert await store.get(refs.profile("good@x.com")) is not None
    assert await store.get(refs.profile("bad@x.com")) is None
    assert summary.errors[0].level == "error"


async def test_invalid_tenant_is_reported(store, refs) -> None:
    summary = await MigrationService(store, refs).migrate_all(["", "a/b"])
    assert summary.failure_count == 2
    assert all(r.error == "Invalid tenant identifier" for r in summary.results)


async def test_empty_run_is_not_success(store, refs) -> None:
    summary = await MigrationService(store, refs).migrate_all([])
    assert not summary.success
    assert summary.log[0].message == "No tenants to migrate"


async def test_bounded_batch_retries_commit() -> None:
    store = FaultyStore()
    store.fail_commits = 2
    batch = BoundedBatch(store, limit=10, attempts=3)
    await batch.set(CollectionPath(("x",)).document("a"), {"v": 1})
    await batch.flush()
    assert batch.commits == 1
    assert store.paths() == ["x/a"]


async def test_bounded_batch_gives_up_after_attempts() -> None:
    store = FaultyStore()
    store.fail_commits = 3
    batch = BoundedBatch(store, limit=10, attempts=3)
    await batch.set(CollectionPath(("x",)).document("a"), {"v": 1})
    with pytest.raises(StoreException):
        await batch.flush()
    assert batch.commits == 0
    assert store.paths() == []


def test_bounded_batch_rejects_limit_above_ceiling(store) -> None:
    with pytest.raises(ValueError):
        BoundedBatch(store, limit=501)

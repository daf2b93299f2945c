"""Migrate tenants from the flat legacy layout into the tenant hierarchy.

Usage:
    python -m scripts.run_migration <tenant> [<tenant> ...]
Each tenant is an email (a.b@x.com) or its safe id (a_b@x_com). One failed
tenant does not stop the others. Prints a summary, verification counts for
each migrated tenant and a numbered error list. Exits 1 when any tenant
failed.
"""

import asyncio
import sys

from ca_admin.core.config import get_settings
from ca_admin.core.lifespan import build_document_store
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.services import MigrationService
from ca_admin.shared.telemetry.logging import setup_logging


async def main() -> int:
    tenants = [t for t in sys.argv[1:] if t.strip()]
    if not tenants:
        print("Usage: python -m scripts.run_migration <tenant> [<tenant> ...]", file=sys.stderr)
        return 2

    settings = get_settings()
    setup_logging()
    store = build_document_store(settings)
    if store is None:
        print("Document store could not be initialized; check Firebase settings", file=sys.stderr)
        return 1

    refs = ReferenceBuilder(settings.tenant_root, settings.legacy_tenant_root)
    migration = MigrationService(
        store,
        refs,
        batch_limit=settings.migration_batch_limit,
        commit_attempts=settings.migration_commit_attempts,
    )
    try:
        summary = await migration.migrate_all(tenants)

        print()
        print("Migration summary")
        print(f"  Successful: {summary.success_count}")
        print(f"  Failed:     {summary.failure_count}")
        for result in summary.results:
            status = "ok" if result.success else f"FAILED ({result.error})"
            print(
                f"  {result.tenant}: {status}, "
                f"{result.operation_count} writes in {result.commits} commits"
            )

        print()
        print("Verification")
        for result in summary.results:
            if not result.success:
                continue
            v = await migration.verify_tenant(result.tenant)
            if v.error:
                print(f"  {v.tenant}: verification failed ({v.error})")
                continue
            print(
                f"  {v.tenant}: profile={'yes' if v.profile else 'no'} clients={v.clients} "
                f"years={v.years} documents={v.documents} generic={v.generic_documents} "
                f"banners={v.banners} admin={v.admin}"
            )

        if summary.errors:
            print()
            print(f"Errors ({len(summary.errors)})")
            for i, entry in enumerate(summary.errors, 1):
                print(f"  {i}. {entry.message}: {entry.error}")
    finally:
        await store.aclose()

    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

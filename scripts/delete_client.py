"""Delete a client and everything under it.

Usage:
    python -m scripts.delete_client <tenant-email> <contact>
Removes every year with its documents, the generic documents and the
client record, then re-checks the legacy location. Exits 1 when the
delete was incomplete.
"""

import asyncio
import sys

from ca_admin.core.config import get_settings
from ca_admin.core.lifespan import build_document_store
from ca_admin.domain.exceptions import CaAdminException, PartialCascadeException
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.services import CascadeDeleteService
from ca_admin.shared.telemetry.logging import setup_logging


async def main() -> int:
    if len(sys.argv) != 3:
        print("Usage: python -m scripts.delete_client <tenant-email> <contact>", file=sys.stderr)
        return 2
    tenant, contact = sys.argv[1], sys.argv[2]

    settings = get_settings()
    setup_logging()
    store = build_document_store(settings)
    if store is None:
        print("Document store could not be initialized; check Firebase settings", file=sys.stderr)
        return 1

    cascade = CascadeDeleteService(
        store, ReferenceBuilder(settings.tenant_root, settings.legacy_tenant_root)
    )
    try:
        result = await cascade.delete_client(tenant, contact)
    except PartialCascadeException as e:
        result = e.result
    except CaAdminException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await store.aclose()

    print(f"Client {result.client_path}")
    print(f"  Found:     {'yes' if result.client_found else 'no'}")
    print(f"  Deleted:   {'yes' if result.client_deleted else 'no'}")
    print(f"  Years:     {result.deleted_years}")
    print(f"  Documents: {result.deleted_documents}")
    print(f"  Generic:   {result.deleted_generic}")
    for i, error in enumerate(result.errors, 1):
        print(f"  {i}. [{error.phase}] {error.path}: {error.message}")
    return 0 if result.complete else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

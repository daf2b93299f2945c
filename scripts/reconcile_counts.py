"""Recompute documentCount for every year of a client.

Usage:
    python -m scripts.reconcile_counts <tenant-email> <contact>
"""

import asyncio
import sys

from ca_admin.core.config import get_settings
from ca_admin.core.lifespan import build_document_store
from ca_admin.domain.exceptions import CaAdminException
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.services import CounterAggregator
from ca_admin.shared.telemetry.logging import setup_logging


async def main() -> int:
    if len(sys.argv) != 3:
        print("Usage: python -m scripts.reconcile_counts <tenant-email> <contact>", file=sys.stderr)
        return 2
    tenant, contact = sys.argv[1], sys.argv[2]

    settings = get_settings()
    setup_logging()
    store = build_document_store(settings)
    if store is None:
        print("Document store could not be initialized; check Firebase settings", file=sys.stderr)
        return 1

    counter = CounterAggregator(
        store, ReferenceBuilder(settings.tenant_root, settings.legacy_tenant_root)
    )
    try:
        counts = await counter.reconcile_client(tenant, contact)
    except CaAdminException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await store.aclose()

    if not counts:
        print(f"Client {contact} has no years")
    for year, count in counts.items():
        print(f"  {year}: {count} documents")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

"""Multi-step store operations: cascade delete, counters, migration, subscriptions."""

from ca_admin.infrastructure.firebase.services.cascade_delete import CascadeDeleteService
from ca_admin.infrastructure.firebase.services.counter_aggregator import CounterAggregator
from ca_admin.infrastructure.firebase.services.migration import BoundedBatch, MigrationService
from ca_admin.infrastructure.firebase.services.subscriptions import (
    Subscription,
    SubscriptionManager,
)

__all__ = [
    "BoundedBatch",
    "CascadeDeleteService",
    "CounterAggregator",
    "MigrationService",
    "Subscription",
    "SubscriptionManager",
]

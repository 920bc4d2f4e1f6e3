"""
API package - Sync gateways (in-memory, SQLite) and the REST API.
"""

from .gateway import (
    GatewayError,
    InMemoryGateway,
    SubscriptionRegistry,
    SyncGateway,
)
from .database import SQLiteGateway

__all__ = [
    'GatewayError',
    'InMemoryGateway',
    'SubscriptionRegistry',
    'SyncGateway',
    'SQLiteGateway',
]

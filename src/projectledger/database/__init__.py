"""Database layer for projectledger application."""

from projectledger.database.base import (
    ClientProjectStore,
    Database,
    LinkWriter,
    TransactionStore,
)
from projectledger.database.factories import create_sqlite_database

__all__ = [
    "ClientProjectStore",
    "Database",
    "LinkWriter",
    "TransactionStore",
    "create_sqlite_database",
]

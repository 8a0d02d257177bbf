"""Transaction linking domain service."""

import logging
from typing import Optional

from projectledger.database.base import Database
from projectledger.domain.errors import (
    NotFoundError,
    client_not_found,
    project_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class LinkService:
    """Persist confirmed transaction-to-project links.

    Only called after a person has accepted (or overridden) a matching
    suggestion. Matching code never links anything itself.
    """

    def __init__(self, db: Database):
        """Initialize link service.

        Args:
            db: Database instance
        """
        self.db = db

    def link(
        self, transaction_id: int, project_id: int, client_id: Optional[int] = None
    ) -> None:
        """Link a transaction to a project.

        Args:
            transaction_id: Transaction ID
            project_id: Project ID
            client_id: Client ID; defaults to the project's owning client

        Raises:
            NotFoundError: If the transaction, project or client doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))

        if client_id is None:
            client_id = project.client_id
        elif self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        self.db.link(transaction_id, project_id, client_id)
        logger.info(
            "Linked transaction %s to project %s (client %s)",
            transaction_id,
            project_id,
            client_id,
        )

    def unlink(self, transaction_id: int) -> None:
        """Remove the project and client links from a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.unlink(transaction_id)
        logger.info("Unlinked transaction %s", transaction_id)

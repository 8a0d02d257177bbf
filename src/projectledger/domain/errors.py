"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StoreError(DomainError):
    """The backing store could not be reached or failed a query."""


def client_not_found(client_id: int) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def client_name_not_found(name: str) -> str:
    """Return message for missing client by name."""
    return f"Client '{name}' not found"


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_client_name(name: str) -> str:
    """Return message for duplicate client name."""
    return f"Client with name '{name}' already exists"


def invalid_date_range(start: object, end: object) -> str:
    """Return message when an end date precedes its start date."""
    return f"End date {end} is before start date {start}"

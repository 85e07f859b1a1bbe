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


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def snapshot_not_found(snapshot_id: int) -> str:
    """Return message for missing balance snapshot."""
    return f"Balance snapshot {snapshot_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def duplicate_category(name: str, category_type: str) -> str:
    """Return message for a duplicate (name, type) category."""
    return f"A {category_type} category named '{name}' already exists"


def duplicate_snapshot_day(account_id: int, day) -> str:
    """Return message when an account already has a snapshot for a day."""
    return f"Account {account_id} already has a balance snapshot on {day.isoformat()}"


def non_positive_amount(amount) -> str:
    """Return message for a transaction amount that is not positive."""
    return (
        f"Amount must be positive, got {amount}. "
        "Use the transaction type to record money going out."
    )


def fallback_category_delete_blocked(name: str) -> str:
    """Return message when deleting the fallback category is attempted."""
    return f"Cannot delete '{name}': it is the fallback category for deleted categories"

"""Domain layer for budgetwise application.

Services are imported from their modules directly (e.g.
``budgetwise.domain.account``) so that the database layer can import
``budgetwise.domain.entities`` without a circular import.
"""

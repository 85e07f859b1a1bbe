"""Command line interface for budgetwise."""

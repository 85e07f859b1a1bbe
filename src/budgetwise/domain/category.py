"""Category domain service.

Transactions store the category name, not its ID. Renaming a category
therefore rewrites the name on its transactions, and deleting one moves its
transactions to the fallback category.
"""

import logging
from typing import Optional

from budgetwise.database.base import Database
from budgetwise.domain.entities import Category as CategoryEntity, CategoryType
from budgetwise.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_category,
    fallback_category_delete_blocked,
)
from budgetwise.domain.transaction import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

DEFAULT_ICON = "Tag"

# (name, type, icon)
DEFAULT_CATEGORIES = [
    ("Salary", CategoryType.INCOME, "Briefcase"),
    ("Investments", CategoryType.INCOME, "TrendingUp"),
    ("Gifts", CategoryType.INCOME, "Gift"),
    ("Groceries", CategoryType.EXPENSE, "ShoppingCart"),
    ("Restaurants", CategoryType.EXPENSE, "Utensils"),
    ("Transport", CategoryType.EXPENSE, "Car"),
    ("Housing", CategoryType.EXPENSE, "Home"),
    ("Bills & Utilities", CategoryType.EXPENSE, "Receipt"),
    ("Health", CategoryType.EXPENSE, "HeartPulse"),
    ("Entertainment", CategoryType.EXPENSE, "Film"),
    ("Shopping", CategoryType.EXPENSE, "ShoppingBag"),
    ("Travel", CategoryType.EXPENSE, "Plane"),
    (DEFAULT_CATEGORY, CategoryType.GENERAL, "Shapes"),
]


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def _parse_type(value: CategoryType | str) -> CategoryType:
        try:
            return CategoryType(value)
        except ValueError:
            raise ValidationError(
                f"Unknown category type '{value}'. Use 'income', 'expense' or 'general'."
            )

    def _require_category(self, category_id: int) -> CategoryEntity:
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def create_category(
        self,
        name: str,
        type: CategoryType | str = CategoryType.EXPENSE,
        icon: str = DEFAULT_ICON,
        color: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            type: "income", "expense" or "general"
            icon: Icon name
            color: Optional display color

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
            ConflictError: If a category with the same name and type exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        category_type = self._parse_type(type)

        if self.db.find_category(name, category_type) is not None:
            raise ConflictError(duplicate_category(name, category_type.value))

        category_id = self.db.create_category(
            name=name, type=category_type, icon=icon or DEFAULT_ICON, color=color
        )
        logger.info("Created %s category %s (%r)", category_type.value, category_id, name)
        return category_id

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def get_category_by_name(
        self, name: str, type: Optional[CategoryType | str] = None
    ) -> Optional[CategoryEntity]:
        """Get category by name, optionally restricted to a type."""
        category_type = self._parse_type(type) if type is not None else None
        return self.db.find_category(name, category_type)

    def list_categories(self, type: Optional[CategoryType | str] = None) -> list[CategoryEntity]:
        """List categories.

        Args:
            type: Optional category type to filter by

        Returns:
            List of category entities ordered by name
        """
        category_type = self._parse_type(type) if type is not None else None
        return self.db.list_categories(type=category_type)

    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        type: Optional[CategoryType | str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Edit a category.

        A new name is written to every transaction that used the old one, in
        the same commit as the category itself.

        Returns:
            Number of transactions renamed

        Raises:
            NotFoundError: If category doesn't exist
            ConflictError: If the new (name, type) pair is taken
        """
        category = self._require_category(category_id)
        category_type = self._parse_type(type) if type is not None else category.type
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Category name cannot be empty")

        target_name = name if name is not None else category.name
        if target_name != category.name or category_type != category.type:
            existing = self.db.find_category(target_name, category_type)
            if existing is not None and existing.id != category_id:
                raise ConflictError(duplicate_category(target_name, category_type.value))

        renamed = self.db.update_category(
            category_id,
            name=name,
            type=category_type if type is not None else None,
            icon=icon,
            color=color,
        )
        if renamed:
            logger.info(
                "Renamed category %r to %r on %d transactions", category.name, name, renamed
            )
        return renamed

    def delete_category(self, category_id: int) -> int:
        """Delete a category and move its transactions to the fallback category.

        Returns:
            Number of transactions moved

        Raises:
            NotFoundError: If category doesn't exist
            DependencyError: If the fallback category itself is being deleted
        """
        category = self._require_category(category_id)
        if category.name == DEFAULT_CATEGORY:
            raise DependencyError(fallback_category_delete_blocked(category.name))

        moved = self.db.delete_category(category_id, fallback_name=DEFAULT_CATEGORY)
        logger.info(
            "Deleted category %r, moved %d transactions to %r",
            category.name,
            moved,
            DEFAULT_CATEGORY,
        )
        return moved

    def init_default_categories(self, force: bool = False) -> tuple[int, int]:
        """Create the default categories.

        Args:
            force: If True, add missing defaults even when categories exist

        Returns:
            Tuple of (created, skipped)
        """
        if self.db.list_categories() and not force:
            return 0, len(DEFAULT_CATEGORIES)

        created = 0
        skipped = 0
        for name, category_type, icon in DEFAULT_CATEGORIES:
            if self.db.find_category(name, category_type) is not None:
                skipped += 1
                continue
            self.db.create_category(name=name, type=category_type, icon=icon)
            created += 1
        logger.info("Initialized default categories: %d created, %d skipped", created, skipped)
        return created, skipped

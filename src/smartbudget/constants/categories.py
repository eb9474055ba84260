"""
Default categories seeded for every new principal, plus the fallbacks used when
an expense arrives without its category expanded.
"""

from __future__ import annotations

from typing import NamedTuple


class CategorySeed(NamedTuple):
    name: str
    color: str
    icon: str


DEFAULT_CATEGORIES: tuple[CategorySeed, ...] = (
    CategorySeed("Food & Dining", "#EF4444", "Utensils"),
    CategorySeed("Transportation", "#3B82F6", "Car"),
    CategorySeed("Shopping", "#8B5CF6", "ShoppingBag"),
    CategorySeed("Entertainment", "#F59E0B", "Film"),
    CategorySeed("Bills & Utilities", "#10B981", "Receipt"),
    CategorySeed("Healthcare", "#EC4899", "Heart"),
    CategorySeed("Education", "#6366F1", "BookOpen"),
    CategorySeed("Other", "#6B7280", "Tag"),
)

# Label and colour for expenses whose category relationship did not resolve
UNRESOLVED_CATEGORY_NAME = "Other"
UNRESOLVED_CATEGORY_COLOR = "#6B7280"

# Label shown for budgets whose category relationship did not resolve
UNKNOWN_BUDGET_CATEGORY = "Unknown"

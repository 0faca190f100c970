"""Display metadata for product categories shown on seller screens."""

from __future__ import annotations

from typing import NamedTuple, Optional


class CategoryBadge(NamedTuple):
    color: str
    emoji: str = ""


DEFAULT_BADGE = CategoryBadge("gray")

CATEGORY_COLORS: dict[str, str] = {
    "Crop": "green",
    "Fertilizer": "blue",
    "Pesticide": "red",
    "Household Items": "purple",
    "Sprayers": "amber",
    "Sprayers Parts": "cyan",
    "Terrace Gardening": "emerald",
    "Household Insecticides": "orange",
    "Farm Machinery": "gray",
    "Plantation": "lime",
}

SUBCATEGORY_BADGES: dict[tuple[str, str], CategoryBadge] = {
    ("Fertilizer", "Organic"): CategoryBadge("green", "\U0001f331"),
    ("Fertilizer", "Non-organic"): CategoryBadge("yellow", "⚗️"),
    ("Crop", "Field Crop"): CategoryBadge("teal", "\U0001f33e"),
    ("Crop", "Vegetable Crop"): CategoryBadge("emerald", "\U0001f966"),
    ("Pesticide", "Herbicides"): CategoryBadge("red", "\U0001f6ab"),
    ("Pesticide", "Insecticides"): CategoryBadge("orange", "\U0001f41b"),
    ("Pesticide", "Fungicides"): CategoryBadge("purple", "\U0001f344"),
}

# Only these categories carry a subcategory on the product form.
SUBCATEGORY_PARENTS = frozenset(parent for parent, _ in SUBCATEGORY_BADGES)


def category_badge(category: Optional[str]) -> CategoryBadge:
    return CategoryBadge(CATEGORY_COLORS.get(category or "", DEFAULT_BADGE.color))


def subcategory_badge(
    category: Optional[str], sub_category: Optional[str]
) -> Optional[CategoryBadge]:
    """Badge for ``sub_category``; ``None`` when the category has none."""

    if category not in SUBCATEGORY_PARENTS or not sub_category:
        return None
    return SUBCATEGORY_BADGES.get((category, sub_category), DEFAULT_BADGE)

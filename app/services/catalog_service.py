"""
Default dry-cleaning catalog for a new business.

Loading is additive: a category that already exists (case-insensitive name)
is reused, and items already in it are skipped, so loading twice adds nothing.
The caller commits.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.categories import Category
from app.models.items import Item

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Dry Cleaning", "description": "Standard dry cleaning services for various garments"},
    {"name": "Washing", "description": "Professional washing and pressing of shirts"},
    {"name": "Alterations", "description": "Garment alterations and repairs"},
    {"name": "Household Items", "description": "Cleaning services for household textiles and items"},
    {"name": "Specialty Cleaning", "description": "Specialized cleaning for delicate or unique items"},
]

# (name, description, price, duration)
DEFAULT_ITEMS = {
    "Dry Cleaning": [
        ("Pants/Slacks", "Dry cleaning for pants or slacks", 5, 3),
        ("Men's Suit (2pc)", "Dry cleaning for a two-piece men's suit", 10, 3),
        ("Skirt", "Dry cleaning for skirts", 5, 3),
        ("Dress", "Standard dry cleaning for dresses", 10, 3),
        ("Blazer/Sport Coat", "Dry cleaning for blazers or sport coats", 5, 3),
        ("Polo Shirt", "Dry cleaning for polo shirts", 5, 3),
        ("Dress Shirt", "Dry cleaning for dress shirts", 5, 3),
        ("Jacket", "Dry cleaning for jackets", 10, 3),
        ("Coat", "Dry cleaning for coats", 10, 3),
        ("Sari", "Dry cleaning for saris", 10, 3),
        ("Jersey", "Dry cleaning for jerseys", 5, 3),
        ("Kids Clothing", "Dry cleaning for kids clothing", 5, 3),
    ],
    "Washing": [
        ("Dress Shirt", "Laundering and pressing for dress shirts", 2.5, 3),
        ("Boxed Shirt", "Laundering with fold service", 3, 3),
        ("Pants/Slacks", "Laundering and pressing for pants or slacks", 2.5, 3),
    ],
    "Household Items": [
        ("Comforter (Queen/King)", "Cleaning for queen or king size comforters", 20, 5),
        ("Blanket", "Cleaning for standard blankets", 10, 5),
        ("Pillow", "Cleaning for pillows", 5, 5),
        ("Curtains (per panel)", "Cleaning for curtain panels", 10, 5),
        ("Area Rug (small)", "Cleaning for small area rugs", 10, 5),
    ],
    "Specialty Cleaning": [
        ("Wedding Dress", "Specialized cleaning for wedding dresses", 100, 5),
        ("Leather/Suede Item", "Specialized cleaning for leather or suede items", 50, 5),
        ("Shoes", "Specialized cleaning for shoes", 20, 5),
    ],
    "Alterations": [
        ("Hem Pants", "Standard hemming for pants", 10, 5),
        ("Replace Zipper", "Zipper replacement service", 10, 5),
        ("Take in Waist", "Alter waistline of pants or skirts", 10, 5),
    ],
}


class UnknownDefaultCategoryError(ValueError):
    pass


@dataclass
class CatalogLoadResult:
    categories_created: List[str] = field(default_factory=list)
    categories_skipped: List[str] = field(default_factory=list)
    items_created: int = 0
    items_skipped: int = 0


def select_default_categories(names: Optional[Sequence[str]] = None) -> List[dict]:
    """
    Default categories to load, in catalog order; all of them when names is empty.

    Raises:
        UnknownDefaultCategoryError: a name is not a default category
    """
    if not names:
        return list(DEFAULT_CATEGORIES)
    known = {entry["name"] for entry in DEFAULT_CATEGORIES}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise UnknownDefaultCategoryError(f"Unknown default categories: {', '.join(unknown)}")
    return [entry for entry in DEFAULT_CATEGORIES if entry["name"] in names]


def load_default_catalog(db: Session, business_id: str, categories: List[dict]) -> CatalogLoadResult:
    result = CatalogLoadResult()

    for entry in categories:
        category = db.query(Category).filter(
            Category.business_id == business_id,
            func.lower(Category.name) == entry["name"].lower()
        ).first()
        if category:
            result.categories_skipped.append(category.name)
        else:
            category = Category(name=entry["name"], description=entry["description"], business_id=business_id)
            db.add(category)
            db.flush()
            result.categories_created.append(category.name)

        existing = {name.lower() for (name,) in db.query(Item.name).filter(Item.category_id == category.id)}
        for name, description, price, duration in DEFAULT_ITEMS.get(entry["name"], []):
            if name.lower() in existing:
                result.items_skipped += 1
                continue
            db.add(Item(
                name=name,
                description=description,
                price=float(price),
                duration=duration,
                item_type="service",
                business_id=business_id,
                category_id=category.id,
            ))
            result.items_created += 1

    logger.info(
        f"Default catalog for business {business_id}: "
        f"{len(result.categories_created)} categories and {result.items_created} items added"
    )
    return result

import logging
from dataclasses import asdict
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.categories import Category
from app.models.user import User
from app.schemas.categories import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    DefaultCatalogLoadResponse,
    DefaultCategoryResponse,
)
from app.services.catalog_service import (
    DEFAULT_CATEGORIES,
    DEFAULT_ITEMS,
    UnknownDefaultCategoryError,
    load_default_catalog,
    select_default_categories,
)
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found, conflict

router = APIRouter(tags=["categories"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _name_taken(db: Session, business_id: str, name: str) -> bool:
    return db.query(Category).filter(
        Category.business_id == business_id,
        func.lower(Category.name) == name.strip().lower()
    ).first() is not None


def _duplicate_name():
    return conflict(
        "A category with this name already exists",
        field="name",
        suggestion="Please use a different category name"
    )


def get_owned_category(db: Session, category_id: str, current_user: User) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise not_found("Category", category_id)
    get_owned_business(db, category.business_id, current_user)
    return category


@router.get(
    "",
    response_model=List[CategoryResponse],
    status_code=status.HTTP_200_OK,
    summary="Get all categories",
    description="Retrieve the catalog categories of a business"
)
async def get_all_categories(
    business_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        logger.info(f"Fetching categories for business {business_id}")
        categories = db.query(Category).filter(Category.business_id == business_id).order_by(Category.name).all()
        logger.info(f"Successfully retrieved {len(categories)} categories")
        return categories
    except Exception as e:
        raise database_error(e, "fetching categories", "category")


@router.get(
    "/defaults",
    response_model=List[DefaultCategoryResponse],
    summary="List the default catalog",
    description="Built-in dry-cleaning categories a business can load with POST /defaults"
)
async def get_default_categories(current_user: User = Depends(get_current_user)):
    return [
        {**entry, "item_count": len(DEFAULT_ITEMS.get(entry["name"], []))}
        for entry in DEFAULT_CATEGORIES
    ]


@router.post(
    "/defaults",
    response_model=DefaultCatalogLoadResponse,
    status_code=status.HTTP_200_OK,
    summary="Load the default catalog"
)
async def load_default_categories(
    business_id: str,
    categories: Optional[List[str]] = Query(None, description="Default category names to load; all when omitted"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Add the built-in categories and their items to a business.

    Categories the business already has are reused and items already in them are skipped.

    Raises:
        HTTPException 400: a requested name is not a default category
    """
    get_owned_business(db, business_id, current_user)
    try:
        selected = select_default_categories(categories)
    except UnknownDefaultCategoryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        result = load_default_catalog(db, business_id, selected)
        db.commit()
        return asdict(result)
    except Exception as e:
        db.rollback()
        raise database_error(e, "loading default catalog", "category")


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category by ID"
)
async def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_category(db, category_id, current_user)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new category"
)
async def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a category. Names are unique per business (case-insensitive).

    Raises:
        HTTPException 409: the business already has a category with this name
    """
    get_owned_business(db, category_data.business_id, current_user)

    if _name_taken(db, category_data.business_id, category_data.name):
        raise _duplicate_name()

    try:
        new_category = Category(
            name=category_data.name.strip(),
            description=category_data.description.strip() if category_data.description else None,
            business_id=category_data.business_id
        )
        db.add(new_category)
        db.commit()
        db.refresh(new_category)

        logger.info(f"Successfully created category: {new_category.name} (ID: {new_category.id})")
        return new_category
    except Exception as e:
        db.rollback()
        raise database_error(e, "creating category", "category")


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update category"
)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    category = get_owned_category(db, category_id, current_user)

    if category_data.name and category_data.name.strip().lower() != category.name.lower():
        if _name_taken(db, category.business_id, category_data.name):
            raise _duplicate_name()

    try:
        if category_data.name:
            category.name = category_data.name.strip()
        if category_data.description is not None:
            category.description = category_data.description.strip() or None

        db.commit()
        db.refresh(category)

        logger.info(f"Successfully updated category: {category.name} (ID: {category.id})")
        return category
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating category", "category")


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete category",
    description="Delete a category and the items in it"
)
async def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    category = get_owned_category(db, category_id, current_user)
    try:
        db.delete(category)
        db.commit()

        logger.info(f"Successfully deleted category with ID: {category_id}")
        return {
            "message": f"Category '{category.name}' deleted successfully",
            "id": category_id
        }
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting category", "category")

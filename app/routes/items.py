import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status, UploadFile, File
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.categories import Category
from app.models.items import Item
from app.models.user import User
from app.schemas.items import ItemCreate, ItemUpdate, ItemResponse
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found
from app.routes.business import read_image_upload
from app.services.storage_service import StorageService, StorageError, InvalidImageError, get_storage_service

router = APIRouter(tags=["items"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_owned_item(db: Session, item_id: str, current_user: User) -> Item:
    item = db.query(Item).filter(Item.id == item_id).first()
    if not item:
        raise not_found("Item", item_id)
    get_owned_business(db, item.business_id, current_user)
    return item


def _check_category(db: Session, business_id: str, category_id: str) -> Category:
    category = db.query(Category).filter(
        Category.id == category_id,
        Category.business_id == business_id
    ).first()
    if not category:
        raise not_found("Category", category_id)
    return category


@router.get("", response_model=List[ItemResponse])
async def list_items(
    business_id: str,
    category_id: Optional[str] = None,
    item_type: Optional[str] = Query(None, pattern="^(service|product)$"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        query = db.query(Item).filter(Item.business_id == business_id)
        if category_id:
            query = query.filter(Item.category_id == category_id)
        if item_type:
            query = query.filter(Item.item_type == item_type)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Item.name.ilike(pattern), Item.sku.ilike(pattern)))
        items = query.order_by(Item.name).all()
        logger.info(f"Retrieved {len(items)} items for business {business_id}")
        return items
    except Exception as e:
        raise database_error(e, "listing items", "item")


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_item(db, item_id, current_user)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, item_data.business_id, current_user)
    _check_category(db, item_data.business_id, item_data.category_id)

    try:
        item = Item(**item_data.model_dump())
        db.add(item)
        db.commit()
        db.refresh(item)

        logger.info(f"Item created: {item.name} at {item.price:.2f} (ID: {item.id})")
        return item
    except Exception as e:
        db.rollback()
        raise database_error(e, "creating item", "item")


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str,
    item_data: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = get_owned_item(db, item_id, current_user)
    update_data = item_data.model_dump(exclude_unset=True)
    if update_data.get("category_id"):
        _check_category(db, item.business_id, update_data["category_id"])

    try:
        for field, value in update_data.items():
            setattr(item, field, value)
        db.commit()
        db.refresh(item)

        logger.info(f"Item updated: {item.name} (ID: {item.id})")
        return item
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating item", "item")


@router.delete("/{item_id}", status_code=status.HTTP_200_OK)
async def delete_item(
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = get_owned_item(db, item_id, current_user)
    try:
        db.delete(item)
        db.commit()
        logger.info(f"Item deleted: {item_id}")
        return {"message": f"Item '{item.name}' deleted successfully", "id": item_id}
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting item", "item")


@router.post("/{item_id}/image", response_model=ItemResponse)
async def upload_item_image(
    item_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    item = get_owned_item(db, item_id, current_user)
    file_content = await read_image_upload(file)

    try:
        key = storage.upload_image(
            file_content,
            f"public/items/{item.business_id}/{item.id}",
            metadata={"objectType": "Item", "objectId": item.id}
        )
    except InvalidImageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error(f"Image upload failed for item {item.id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    try:
        item.image_url = key
        db.commit()
        db.refresh(item)
        return item
    except Exception as e:
        db.rollback()
        raise database_error(e, "saving item image", "item")

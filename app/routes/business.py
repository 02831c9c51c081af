import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.business import Business
from app.models.user import User
from app.schemas.business import BusinessCreate, BusinessResponse, BusinessUpdate
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error
from app.services.storage_service import StorageService, StorageError, InvalidImageError, get_storage_service

router = APIRouter(tags=["business"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
MAX_IMAGE_BYTES = 5 * 1024 * 1024


async def read_image_upload(file: UploadFile) -> bytes:
    """Shared checks for logo and catalog photo uploads"""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type '{file.content_type}'. Only JPEG, PNG, GIF, and WebP images are allowed."
        )

    file_content = await file.read()
    if len(file_content) == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty file provided. Please select a valid image file."
        )
    if len(file_content) > MAX_IMAGE_BYTES:
        file_size_mb = len(file_content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File size ({file_size_mb:.2f} MB) exceeds the maximum limit of 5 MB. Please compress the image or choose a smaller file."
        )
    return file_content


@router.get("", response_model=List[BusinessResponse])
async def list_businesses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Businesses owned by the authenticated user"""
    try:
        businesses = db.query(Business).filter(Business.user_id == current_user.id).order_by(Business.name).all()
        logger.info(f"Retrieved {len(businesses)} businesses for user {current_user.id}")
        return businesses
    except Exception as e:
        raise database_error(e, "listing businesses", "business")


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    business_data: BusinessCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        business = Business(**business_data.model_dump(), user_id=current_user.id)
        db.add(business)
        db.commit()
        db.refresh(business)

        logger.info(f"Business created: {business.name} (ID: {business.id}) by user {current_user.id}")
        return business
    except Exception as e:
        db.rollback()
        raise database_error(e, "creating business", "business")


@router.get("/{business_id}", response_model=BusinessResponse)
async def get_business(
    business_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_business(db, business_id, current_user)


@router.put("/{business_id}", response_model=BusinessResponse)
async def update_business(
    business_id: str,
    business_data: BusinessUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    business = get_owned_business(db, business_id, current_user)
    try:
        update_data = business_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(business, field, value)

        db.commit()
        db.refresh(business)

        logger.info(f"Business updated: {business.name} (ID: {business.id}), fields: {list(update_data)}")
        return business
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating business", "business")


@router.delete("/{business_id}", status_code=status.HTTP_200_OK)
async def delete_business(
    business_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    business = get_owned_business(db, business_id, current_user)
    try:
        db.delete(business)
        db.commit()
        logger.info(f"Business deleted: {business_id}")
        return {"message": f"Business '{business.name}' deleted successfully", "id": business_id}
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting business", "business")


@router.post("/{business_id}/logo", response_model=BusinessResponse)
async def upload_logo(
    business_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Upload the business logo to object storage and save its key in logo_url"""
    business = get_owned_business(db, business_id, current_user)
    file_content = await read_image_upload(file)

    try:
        key = storage.upload_image(
            file_content,
            f"public/logos/{business.id}",
            metadata={"objectType": "Business", "objectId": business.id}
        )
    except InvalidImageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error(f"Logo upload failed for business {business.id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    try:
        business.logo_url = key
        db.commit()
        db.refresh(business)
        logger.info(f"Logo uploaded for business: {business.name}")
        return business
    except Exception as e:
        db.rollback()
        raise database_error(e, "saving business logo", "business")

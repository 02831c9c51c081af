from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.models.business import Business
from app.core.security import verify_access_token


def get_current_user(
    token_payload: dict = Depends(verify_access_token),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user from the database.
    Validates the bearer token and returns the User object.
    """
    user_id = token_payload.get("sub")
    
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    return user


def get_owned_business(db: Session, business_id: str, current_user: User) -> Business:
    """
    Load a business and check it belongs to the current user.
    Every business-scoped route goes through here before touching child records.
    """
    business = db.query(Business).filter(Business.id == business_id).first()
    if not business:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Business with ID {business_id} not found"
        )
    if business.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this business"
        )
    return business

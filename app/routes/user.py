from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from app.database import get_db
from app.models.user import User
from app.schemas.user import UserCreate, User as UserSchema, UserLogin, TokenWithRefresh, RefreshTokenRequest
from app.core.security import create_access_token, create_refresh_token, decode_token, is_refresh_token
from app.core.dependencies import get_current_user
from app.core.errors import database_error
from passlib.context import CryptContext

router = APIRouter(tags=["users"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["argon2"],
    default="argon2",
    deprecated="auto",
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _issue_tokens(user_id: str, role: str) -> dict:
    claims = {"sub": str(user_id), "role": role}
    return {
        "access_token": create_access_token(claims),
        "token_type": "bearer",
        "refresh_token": create_refresh_token(claims),
    }


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Create an owner account. Businesses created later are owned by this user."""
    try:
        if db.query(User).filter(User.email == user.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        if db.query(User).filter(User.username == user.username).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken"
            )

        logger.info(f"Registering user {user.username}")
        db_user = User(
            email=user.email,
            username=user.username,
            hashed_password=pwd_context.hash(user.password),
            full_name=user.full_name,
            role=user.role
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)

        logger.info(f"User registered: {db_user.username} (ID: {db_user.id})")
        return db_user
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise database_error(e, "registering user", "user")


@router.post("/auth", response_model=TokenWithRefresh)
async def authenticate_user(userdetails: UserLogin, db: Session = Depends(get_db)):
    logger.info(f"Authenticating user with email: {userdetails.email}")
    db_user = db.query(User).filter(User.email == userdetails.email).first()
    if not db_user or not verify_password(userdetails.password, db_user.hashed_password):
        logger.warning(f"Failed login for {userdetails.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return _issue_tokens(db_user.id, db_user.role)


@router.post("/refresh", response_model=TokenWithRefresh)
async def refresh_token(request: RefreshTokenRequest):
    if not is_refresh_token(request.refresh_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired refresh token")

    payload = decode_token(request.refresh_token)
    return _issue_tokens(payload.get("sub"), payload.get("role"))


@router.get("/me", response_model=UserSchema)
async def get_me(current_user: User = Depends(get_current_user)):
    """The authenticated user; its id is the owner of every business it creates"""
    return current_user

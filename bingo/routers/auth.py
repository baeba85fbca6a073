import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_user
from bingo.core.exceptions import AuthenticationError, ConflictError, DependencyError
from bingo.core.security import verify_password, create_access_token
from bingo.models.user import User, ROLE_COACH
from bingo.schemas.auth import UserRegister, UserLogin, Token, UserResponse, UserProfileUpdate
from bingo.repos import coach_repo
from bingo.repos.user_repo import (
    get_by_email,
    get_by_id,
    create as create_user,
    update as update_user,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

COACH_PROFILE_FIELDS = (
    "expertise",
    "specialties",
    "industries",
    "availability",
    "languages",
    "certifications",
    "years_experience",
    "coaching_style",
    "hourly_rate",
    "bio",
)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    try:
        if get_by_email(db, data.email):
            raise ConflictError("User with this email already exists")
        user = create_user(
            db,
            data.email,
            data.password,
            role=data.role,
            first_name=data.first_name,
            last_name=data.last_name,
            bio=data.bio,
            location=data.location,
            phone=data.phone,
            commit=False,
        )
        if data.role == ROLE_COACH:
            coach_repo.create(db, user, commit=False, **{f: getattr(data, f) for f in COACH_PROFILE_FIELDS})
        db.commit()
        db.refresh(user)
        logger.info("User registered: %s role=%s", user.id, user.role)
        token = create_access_token(user.id)
        return Token(access_token=token, user=UserResponse.model_validate(user))
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Register failed: %s", e)
        raise DependencyError("Failed to register user") from e


@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = get_by_email(db, data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
        logger.info("User logged in: %s", user.id)
        token = create_access_token(user.id)
        return Token(access_token=token, user=UserResponse.model_validate(user))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed: %s", e)
        raise DependencyError("Login failed") from e


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserResponse)
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        update_user(db, user.id, **data.model_dump(exclude_none=True))
        return get_by_id(db, user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Profile update failed for user=%s: %s", user.id, e)
        raise DependencyError("Failed to update profile") from e

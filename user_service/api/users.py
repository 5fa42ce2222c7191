# user_service/api/users.py

import re
import logging
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, HTTPException, status, Depends
from passlib.exc import PasswordTruncateError
from sqlalchemy.orm import Session

from user_service.database import get_db
from user_service.core.errors import StorageError, UserAlreadyExistsError
from user_service.core.repository import UserRepository
from user_service.core.security import MAX_PASSWORD_BYTES, hash_password, verify_password
from user_service.models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

# Ids are stored in a 32-bit signed integer column
MAX_USER_ID = 2**31 - 1
USER_ID_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


# -------------------------------
# Request / Response Schemas
# -------------------------------

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    email: str
    password: str
    full_name: Optional[str] = Field(default=None, alias="fullName")


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterResponse(BaseModel):
    id: int


class UserResponse(BaseModel):
    """
    Public view of a user, without the password hash.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    full_name: Optional[str] = Field(alias="fullName")
    created_at: str = Field(alias="createdAt")
    is_active: bool = Field(alias="isActive")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            created_at=format_timestamp(user.created_at),
            is_active=user.is_active,
        )


def format_timestamp(value: datetime) -> str:
    # SQLite hands timestamps back without tzinfo; they are always stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_user_id(raw: str) -> Optional[int]:
    if not USER_ID_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if not -MAX_USER_ID - 1 <= value <= MAX_USER_ID:
        return None
    return value


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


# -------------------------------
# User Endpoints
# -------------------------------

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register(req: RegisterRequest, repo: UserRepository = Depends(get_user_repository)):
    """
    Creates a user and returns its id.
    Blank required fields are rejected before anything touches the database.
    """
    if not req.username.strip() or not req.email.strip() or not req.password.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")

    try:
        password_hash = hash_password(req.password)
    except PasswordTruncateError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
        )
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password contains invalid characters")

    try:
        user_id = repo.create(
            username=req.username,
            email=req.email,
            password_hash=password_hash,
            full_name=req.full_name,
        )
    except UserAlreadyExistsError:
        logger.warning("Registration rejected, username or email taken: %s", req.username)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username or email already exists")
    except StorageError:
        logger.exception("Registration error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed")

    logger.info("Registered user %s with id %d", req.username, user_id)
    return {"id": user_id}


@router.post("/login", response_model=UserResponse)
def login(credentials: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    """
    Checks the credentials and returns the matching user.
    Unknown usernames and wrong passwords produce the same 401.
    """
    try:
        user = repo.get_by_username(credentials.username)
    except StorageError:
        logger.exception("Login error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return UserResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user ID")

    try:
        user = repo.get_by_id(parsed_id)
    except StorageError:
        logger.exception("User fetch error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return UserResponse.from_user(user)

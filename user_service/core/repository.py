# user_service/core/repository.py

from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from user_service.core.errors import StorageError, UserAlreadyExistsError
from user_service.models.user import User, utcnow


class UserRepository:
    """
    Data access for the users table.
    Every failure surfaces as a StorageError subclass; callers never see
    driver exceptions.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        full_name: Optional[str] = None,
    ) -> int:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            created_at=utcnow(),
            is_active=True,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError("Username or email already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to insert user") from e
        return user.id

    def get_by_username(self, username: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.username == username).one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to load user by username") from e

    def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to load user by id") from e

"""
User service for authentication and account lookups
"""

from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime
from typing import Optional
import logging

from mealwell.models.user import User
from mealwell.schemas.user import UserCreate, UserLogin
from mealwell.auth.auth_handler import AuthHandler
from mealwell.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

class UserService:
    """Service for user management operations"""

    def __init__(self, db: Session):
        self.db = db
        self.auth_handler = AuthHandler()

    async def create_user(self, user_data: UserCreate) -> User:
        """Create a new user account"""
        email = user_data.email.lower()
        try:
            existing_user = self.db.query(User).filter(User.email == email).first()
            if existing_user:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already registered"
                )

            db_user = User(
                name=user_data.name,
                email=email,
                hashed_password=self.auth_handler.get_password_hash(user_data.password),
                role=user_data.role,
                phone_number=user_data.phone_number,
                is_active=True,
            )

            self.db.add(db_user)
            self.db.commit()
            self.db.refresh(db_user)

            logger.info(f"Created new {db_user.role} account: {db_user.email}")
            return db_user

        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user: {e}")
            raise DatabaseError(f"Failed to create user account: {str(e)}", e)

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Return the user for valid credentials, None otherwise"""
        try:
            user = self.db.query(User).filter(User.email == login_data.email.lower()).first()

            if not user:
                logger.warning(f"Login attempt with unknown email: {login_data.email}")
                return None

            if not user.is_active:
                logger.warning(f"Login attempt with inactive user: {user.email}")
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Account has been deactivated"
                )

            if not self.auth_handler.verify_password(login_data.password, user.hashed_password):
                logger.warning(f"Failed login attempt for user: {user.email}")
                return None

            user.last_login = datetime.utcnow()
            self.db.commit()

            logger.info(f"Successful login for user: {user.email}")
            return user

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            raise DatabaseError(f"Authentication failed: {str(e)}", e)

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
